"""
SyntaxStore — SQLite-backed persistence for the syntax catalogue.

Usage::

    store = SyntaxStore(db_path="~/.syntaxdb/vvs_syntax_db.sqlite3")
    await store.open()                    # creates the schema once

    async with store.transaction() as conn:
        await conn.execute("DELETE FROM languages")

No connection is kept open between operations: every ``connect()`` /
``transaction()`` opens a fresh aiosqlite connection and closes it on
every exit path.
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from dataclasses import replace
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

from syntaxdb.config import StoreConfig
from syntaxdb.exceptions import StoreOpenError

from .schema import PARTITIONS, SCHEMA_VERSION, schema_statements

__all__ = ["SyntaxStore"]

logger = logging.getLogger(__name__)


class SyntaxStore:
    """
    Owns the database file and its schema.

    The schema is created (or upgraded additively) on the first connection
    a store instance makes; later connections only pay for a flag check.
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        config: Optional[StoreConfig] = None,
    ) -> None:
        self._config = config or StoreConfig()
        if db_path is not None:
            self._config = replace(self._config, db_path=db_path)
        self._db_path = self._config.path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @staticmethod
    def partition_names() -> list[str]:
        """Names of every partition, in schema order."""
        return [p.name for p in PARTITIONS]

    # ── Internal helpers ──────────────────────────────────────────────────

    async def _open_connection(self) -> aiosqlite.Connection:
        try:
            conn = await aiosqlite.connect(str(self._db_path), timeout=self._config.timeout)
        except (sqlite3.Error, OSError) as exc:
            raise StoreOpenError(f"Failed to open database {self._db_path}: {exc}") from exc
        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute(f"PRAGMA journal_mode={self._config.journal_mode}")
            await self._ensure_schema(conn)
        except sqlite3.Error as exc:
            await conn.close()
            raise StoreOpenError(f"Failed to configure {self._db_path}: {exc}") from exc
        except BaseException:
            await conn.close()
            raise
        return conn

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        """Create missing partitions and indices, once per store instance."""
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                async with conn.execute("PRAGMA user_version") as cur:
                    row = await cur.fetchone()
                version = row[0] if row else 0
                if version > SCHEMA_VERSION:
                    raise StoreOpenError(
                        f"Database {self._db_path} has schema version {version}, "
                        f"newer than supported version {SCHEMA_VERSION}"
                    )
                if version < SCHEMA_VERSION:
                    for stmt in schema_statements():
                        await conn.execute(stmt)
                    await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
                    await conn.commit()
                    logger.info(
                        "Schema upgraded from v%d to v%d at %s",
                        version, SCHEMA_VERSION, self._db_path,
                    )
            except sqlite3.Error as exc:
                raise StoreOpenError(
                    f"Failed to create schema in {self._db_path}: {exc}"
                ) from exc
            self._schema_ready = True

    # ── Public API ────────────────────────────────────────────────────────

    async def open(self) -> None:
        """Make sure the database file exists with the current schema."""
        async with self.connect():
            pass

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a ready connection; it is closed when the block exits."""
        conn = await self._open_connection()
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Yield a connection whose writes are committed when the block exits
        normally and rolled back when it raises.
        """
        async with self.connect() as conn:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()
