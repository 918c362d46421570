"""
DatabaseInitializer — schema creation, first-run seeding and clearing.

Usage::

    initializer = DatabaseInitializer(store)
    await initializer.initialize()        # schema + seed if the store is empty
    await initializer.reset()             # wipe everything, then seed again
"""

import logging
import sqlite3
from typing import Optional

import aiosqlite

from syntaxdb.exceptions import OperationError
from syntaxdb.repositories import Repositories
from syntaxdb.seeding import SeedFixtureProvider, get_provider
from syntaxdb.store.db import SyntaxStore
from syntaxdb.store.schema import PARTITIONS

__all__ = ["DatabaseInitializer", "clear_partitions"]

logger = logging.getLogger(__name__)


async def clear_partitions(conn: aiosqlite.Connection) -> None:
    """Delete every row of every partition using *conn*; the caller commits."""
    for partition in PARTITIONS:
        await conn.execute(f"DELETE FROM {partition.name}")


class DatabaseInitializer:
    """
    Brings a store into a usable state.

    Seeding runs in a single store transaction: either every fixture record
    is written or none is, so a failed seed leaves the store empty and the
    next initialization simply tries again.
    """

    def __init__(
        self,
        store: SyntaxStore,
        provider: Optional[SeedFixtureProvider] = None,
    ) -> None:
        self._store = store
        self._provider = provider or get_provider("Python")
        self._repos = Repositories.for_store(store)

    @property
    def provider(self) -> SeedFixtureProvider:
        return self._provider

    async def initialize(self) -> None:
        """Open the store (creating the schema) and seed it if it is empty."""
        try:
            await self._store.open()
            await self.seed_if_needed()
        except Exception:
            logger.error("Database initialization failed", exc_info=True)
            raise

    async def seed_if_needed(self) -> bool:
        """
        Seed the fixture when no language exists yet.

        Returns:
            True if the fixture was written, False if seeding was skipped.
        """
        if await self._repos.languages.count() > 0:
            logger.debug("Languages present, seeding skipped")
            return False

        async with self._store.transaction() as conn:
            await self._seed(self._repos.bind(conn))
        logger.info("Seeded %s fixture into %s", self._provider.language_name, self._store.db_path)
        return True

    async def _seed(self, repos: Repositories) -> None:
        provider = self._provider

        language_id = await repos.languages.create(provider.extract_language_definition())
        logger.debug("Seeded language %s id=%d", provider.language_name, language_id)

        type_ids: dict[str, int] = {}
        for type_def in provider.extract_type_definitions():
            type_ids[type_def.name] = await repos.types.create(type_def)

        for mapping in provider.generate_type_mappings(type_ids, language_id):
            await repos.type_mappings.create(mapping)

        function_ids: dict[str, int] = {}
        for fn in provider.extract_built_in_functions():
            function_ids[fn.name] = await repos.functions.create(fn)

        patterns = provider.generate_syntax_patterns(function_ids, language_id)
        for pattern in patterns:
            await repos.patterns.create(pattern)

        logger.debug(
            "Seeded %d types, %d functions, %d patterns",
            len(type_ids), len(function_ids), len(patterns),
        )

    async def clear(self) -> None:
        """Delete every record from every partition in one transaction."""
        try:
            async with self._store.transaction() as conn:
                await clear_partitions(conn)
        except sqlite3.Error as exc:
            logger.error("Failed to clear database %s: %s", self._store.db_path, exc)
            raise OperationError(f"Failed to clear database: {exc}", "clear") from exc
        logger.info("Cleared all partitions in %s", self._store.db_path)

    async def reset(self) -> None:
        """clear() followed by initialize(); the two steps are not atomic together."""
        await self.clear()
        await self.initialize()
