"""
SyntaxDatabaseService — the single entry point callers use.

Usage::

    service = SyntaxDatabaseService(SyntaxStore(db_path="~/.syntaxdb/catalog.sqlite3"))

    python = await service.get_language_by_name("Python")   # seeds on first use
    fn     = await service.get_function_by_name("math_add")
    pat    = await service.get_syntax_pattern(fn.id, python.id)
    code   = pat.render("a", "b")                            # "a + b"

    snapshot = await service.export_database()
    snapshot.write("backup.json")
    await service.import_database(DatabaseSnapshot.read("backup.json"))

Every entity operation first awaits ensure_initialized(), so the store is
created and seeded lazily by whichever call comes first.
"""

import asyncio
import logging
import sqlite3
from dataclasses import dataclass, replace
from typing import Optional, Union

from syntaxdb.exceptions import OperationError
from syntaxdb.initializer import DatabaseInitializer, clear_partitions
from syntaxdb.repositories import Repositories
from syntaxdb.seeding import SeedFixtureProvider
from syntaxdb.snapshot import DatabaseSnapshot
from syntaxdb.store.db import SyntaxStore
from syntaxdb.store.models import (
    FunctionCategory,
    FunctionDefinition,
    Language,
    SyntaxPattern,
    TypeDefinition,
    TypeMapping,
)

__all__ = ["SyntaxDatabaseService", "InitializationState"]

logger = logging.getLogger(__name__)


@dataclass
class InitializationState:
    """
    Lazy-initialization bookkeeping for one service instance.

    Fields
    ──────
    initialized — True once schema creation and seeding have succeeded
    pending     — the in-flight initialization or import task all callers share
    """
    initialized: bool                    = False
    pending:     Optional[asyncio.Task]  = None

    def reset(self) -> None:
        self.initialized = False
        self.pending = None


class SyntaxDatabaseService:
    """
    Facade over the store, the five repositories and the initializer.

    Point lookups return None on a miss, collection lookups return [].
    Storage failures surface as OperationError / DuplicateKeyError,
    open failures as StoreOpenError.
    """

    def __init__(
        self,
        store: Optional[SyntaxStore] = None,
        initializer: Optional[DatabaseInitializer] = None,
        provider: Optional[SeedFixtureProvider] = None,
    ) -> None:
        self._store = store or SyntaxStore()
        self._initializer = initializer or DatabaseInitializer(self._store, provider)
        self._repos = Repositories.for_store(self._store)
        self._state = InitializationState()

    @property
    def store(self) -> SyntaxStore:
        return self._store

    @property
    def state(self) -> InitializationState:
        return self._state

    # ── Initialization ────────────────────────────────────────────────────

    async def ensure_initialized(self) -> None:
        """
        Initialize the store at most once, however many callers race here.

        Concurrent callers await the same task.  The task is shielded, so a
        cancelled caller does not cancel initialization for the others.
        A failure is re-raised to every waiter and the next call retries.
        """
        if self._state.initialized:
            return
        if self._state.pending is None or self._state.pending.cancelled():
            self._publish(self._initializer.initialize())
        await asyncio.shield(self._state.pending)

    def _publish(self, work) -> asyncio.Task:
        """
        Run *work* as the pending task that ensure_initialized() callers
        wait on.  Success marks the store initialized; on any outcome,
        cancellation included, the task stops being pending.
        """
        task = asyncio.get_running_loop().create_task(self._settle(work))
        self._state.pending = task
        return task

    async def _settle(self, work) -> None:
        task = asyncio.current_task()
        try:
            await work
            if self._state.pending is task:
                self._state.initialized = True
        finally:
            if self._state.pending is task:
                self._state.pending = None

    async def _await_pending(self) -> None:
        while self._state.pending is not None and not self._state.pending.cancelled():
            await asyncio.shield(self._state.pending)

    async def init_database(self) -> None:
        """Run initialization again (schema check + seed-if-empty)."""
        self._state.initialized = False
        await self.ensure_initialized()

    async def clear_database(self) -> None:
        """Delete every record.  The next operation reseeds the fixture."""
        await self._initializer.clear()
        self._state.reset()

    async def reset_database(self) -> None:
        """Delete every record and seed the fixture again immediately."""
        self._state.reset()
        await self._initializer.reset()
        self._state.initialized = True

    # ── Languages ─────────────────────────────────────────────────────────

    async def get_language_by_id(self, language_id: int) -> Optional[Language]:
        await self.ensure_initialized()
        return await self._repos.languages.get_by_id(language_id)

    async def get_language_by_name(self, name: str) -> Optional[Language]:
        await self.ensure_initialized()
        return await self._repos.languages.get_by_name(name)

    async def get_languages(self) -> list[Language]:
        await self.ensure_initialized()
        return await self._repos.languages.get_all()

    async def create_language(self, language: Language) -> int:
        await self.ensure_initialized()
        return await self._repos.languages.create(language)

    async def update_language(self, language: Language) -> None:
        await self.ensure_initialized()
        await self._repos.languages.update(language)

    async def delete_language(self, language_id: int) -> None:
        await self.ensure_initialized()
        await self._repos.languages.delete(language_id)

    # ── Functions ─────────────────────────────────────────────────────────

    async def get_function_by_id(self, function_id: int) -> Optional[FunctionDefinition]:
        await self.ensure_initialized()
        return await self._repos.functions.get_by_id(function_id)

    async def get_function_by_name(self, name: str) -> Optional[FunctionDefinition]:
        await self.ensure_initialized()
        return await self._repos.functions.get_by_name(name)

    async def get_functions(self) -> list[FunctionDefinition]:
        await self.ensure_initialized()
        return await self._repos.functions.get_all()

    async def get_functions_by_category(
        self,
        category: Union[FunctionCategory, str],
    ) -> list[FunctionDefinition]:
        await self.ensure_initialized()
        return await self._repos.functions.get_by_category(category)

    async def get_built_in_functions(self) -> list[FunctionDefinition]:
        await self.ensure_initialized()
        return await self._repos.functions.get_built_in()

    async def search_functions(self, query: str) -> list[FunctionDefinition]:
        """Substring search; a blank query returns every function."""
        await self.ensure_initialized()
        return await self._repos.functions.search(query)

    async def create_function(self, function: FunctionDefinition) -> int:
        await self.ensure_initialized()
        return await self._repos.functions.create(function)

    async def update_function(self, function: FunctionDefinition) -> None:
        await self.ensure_initialized()
        await self._repos.functions.update(function)

    async def delete_function(self, function_id: int) -> None:
        await self.ensure_initialized()
        await self._repos.functions.delete(function_id)

    # ── Syntax patterns ───────────────────────────────────────────────────

    async def get_syntax_pattern(
        self,
        function_id: int,
        language_id: int,
    ) -> Optional[SyntaxPattern]:
        await self.ensure_initialized()
        return await self._repos.patterns.get_by_function_and_language(function_id, language_id)

    async def get_syntax_pattern_by_id(self, pattern_id: int) -> Optional[SyntaxPattern]:
        await self.ensure_initialized()
        return await self._repos.patterns.get_by_id(pattern_id)

    async def get_syntax_patterns_by_language(self, language_id: int) -> list[SyntaxPattern]:
        await self.ensure_initialized()
        return await self._repos.patterns.get_by_language(language_id)

    async def create_syntax_pattern(self, pattern: SyntaxPattern) -> int:
        await self.ensure_initialized()
        return await self._repos.patterns.create(pattern)

    async def update_syntax_pattern(self, pattern: SyntaxPattern) -> None:
        await self.ensure_initialized()
        await self._repos.patterns.update(pattern)

    async def delete_syntax_pattern(self, pattern_id: int) -> None:
        await self.ensure_initialized()
        await self._repos.patterns.delete(pattern_id)

    # ── Types ─────────────────────────────────────────────────────────────

    async def get_type_by_id(self, type_id: int) -> Optional[TypeDefinition]:
        await self.ensure_initialized()
        return await self._repos.types.get_by_id(type_id)

    async def get_type_by_name(self, name: str) -> Optional[TypeDefinition]:
        await self.ensure_initialized()
        return await self._repos.types.get_by_name(name)

    async def get_types(self) -> list[TypeDefinition]:
        await self.ensure_initialized()
        return await self._repos.types.get_all()

    async def create_type(self, type_def: TypeDefinition) -> int:
        await self.ensure_initialized()
        return await self._repos.types.create(type_def)

    async def update_type(self, type_def: TypeDefinition) -> None:
        await self.ensure_initialized()
        await self._repos.types.update(type_def)

    async def delete_type(self, type_id: int) -> None:
        await self.ensure_initialized()
        await self._repos.types.delete(type_id)

    # ── Type mappings ─────────────────────────────────────────────────────

    async def get_type_mapping(
        self,
        abstract_type_id: int,
        language_id: int,
    ) -> Optional[TypeMapping]:
        await self.ensure_initialized()
        return await self._repos.type_mappings.get_by_type_and_language(
            abstract_type_id, language_id
        )

    async def get_type_mapping_by_id(self, mapping_id: int) -> Optional[TypeMapping]:
        await self.ensure_initialized()
        return await self._repos.type_mappings.get_by_id(mapping_id)

    async def get_type_mappings_by_language(self, language_id: int) -> list[TypeMapping]:
        await self.ensure_initialized()
        return await self._repos.type_mappings.get_by_language(language_id)

    async def create_type_mapping(self, mapping: TypeMapping) -> int:
        await self.ensure_initialized()
        return await self._repos.type_mappings.create(mapping)

    async def update_type_mapping(self, mapping: TypeMapping) -> None:
        await self.ensure_initialized()
        await self._repos.type_mappings.update(mapping)

    async def delete_type_mapping(self, mapping_id: int) -> None:
        await self.ensure_initialized()
        await self._repos.type_mappings.delete(mapping_id)

    # ── Export / import ───────────────────────────────────────────────────

    async def export_database(self) -> DatabaseSnapshot:
        """Every record of every partition, ids included, read in one transaction."""
        await self.ensure_initialized()
        async with self._store.transaction() as conn:
            # SELECTs do not open a transaction on their own
            await conn.execute("BEGIN")
            repos = self._repos.bind(conn)
            snapshot = DatabaseSnapshot(
                languages=await repos.languages.get_all(),
                functions=await repos.functions.get_all(),
                patterns=await repos.patterns.get_all(),
                types=await repos.types.get_all(),
                type_mappings=await repos.type_mappings.get_all(),
            )
        logger.info("Exported %d records from %s", snapshot.record_count(), self._store.db_path)
        return snapshot

    async def import_database(
        self,
        snapshot: Union[DatabaseSnapshot, dict],
        remap_references: bool = False,
    ) -> None:
        """
        Replace the whole store with *snapshot*.

        All partitions are cleared and every record is recreated with a
        fresh id, in one transaction.  By default functionId, languageId and
        abstractTypeId fields are written unchanged, so they only stay valid
        when the new ids happen to match the old ones.  With
        ``remap_references=True`` they are rewritten through old→new id maps.

        The import runs as the pending initialization, so operations that
        arrive meanwhile wait for it and never seed the fixture on top of
        imported data.
        """
        if not isinstance(snapshot, DatabaseSnapshot):
            snapshot = DatabaseSnapshot.from_dict(snapshot)
        await self._await_pending()
        await asyncio.shield(self._publish(self._import(snapshot, remap_references)))

    async def _import(self, snapshot: DatabaseSnapshot, remap_references: bool) -> None:
        await self._store.open()
        async with self._store.transaction() as conn:
            try:
                await clear_partitions(conn)
            except sqlite3.Error as exc:
                raise OperationError(f"Failed to clear database for import: {exc}", "import") from exc
            repos = self._repos.bind(conn)
            if remap_references:
                await self._import_remapped(repos, snapshot)
            else:
                await self._import_verbatim(repos, snapshot)

        logger.info(
            "Imported %d records into %s (remap_references=%s)",
            snapshot.record_count(), self._store.db_path, remap_references,
        )

    @staticmethod
    async def _import_verbatim(repos: Repositories, snapshot: DatabaseSnapshot) -> None:
        for language in snapshot.languages:
            await repos.languages.create(language)
        for function in snapshot.functions:
            await repos.functions.create(function)
        for pattern in snapshot.patterns:
            await repos.patterns.create(pattern)
        for type_def in snapshot.types:
            await repos.types.create(type_def)
        for mapping in snapshot.type_mappings:
            await repos.type_mappings.create(mapping)

    @staticmethod
    async def _import_remapped(repos: Repositories, snapshot: DatabaseSnapshot) -> None:
        # References to ids missing from the snapshot are kept as they are.
        language_ids: dict[int, int] = {}
        for language in snapshot.languages:
            new_id = await repos.languages.create(language)
            if language.id is not None:
                language_ids[language.id] = new_id

        type_ids: dict[int, int] = {}
        for type_def in snapshot.types:
            new_id = await repos.types.create(type_def)
            if type_def.id is not None:
                type_ids[type_def.id] = new_id
        for type_def in snapshot.types:
            if type_def.id in type_ids and type_def.base_type in type_ids:
                await repos.types.update(
                    replace(type_def, id=type_ids[type_def.id], base_type=type_ids[type_def.base_type])
                )

        function_ids: dict[int, int] = {}
        for function in snapshot.functions:
            new_id = await repos.functions.create(function)
            if function.id is not None:
                function_ids[function.id] = new_id

        for pattern in snapshot.patterns:
            await repos.patterns.create(
                replace(
                    pattern,
                    function_id=function_ids.get(pattern.function_id, pattern.function_id),
                    language_id=language_ids.get(pattern.language_id, pattern.language_id),
                )
            )
        for mapping in snapshot.type_mappings:
            await repos.type_mappings.create(
                replace(
                    mapping,
                    abstract_type_id=type_ids.get(mapping.abstract_type_id, mapping.abstract_type_id),
                    language_id=language_ids.get(mapping.language_id, mapping.language_id),
                )
            )
