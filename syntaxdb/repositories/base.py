"""Generic repository over one store partition."""

import json
import logging
import sqlite3
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator, Generic, Optional, TypeVar

import aiosqlite

from syntaxdb.exceptions import DuplicateKeyError, InvalidArgumentError, OperationError
from syntaxdb.store.db import SyntaxStore
from syntaxdb.store.schema import Partition

__all__ = ["BaseRepository"]

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")
RepoT = TypeVar("RepoT", bound="BaseRepository")


class BaseRepository(Generic[RecordT]):
    """
    Typed CRUD for one partition.

    Subclasses set ``partition`` (schema descriptor) and ``record_type``
    (a model class with ``to_dict()`` / ``from_dict(data, record_id)``).

    Every call runs in its own store transaction, opened and closed around
    that single action.  A repository created with ``bind(conn)`` instead
    runs on the caller's connection and leaves commit/rollback to the
    caller, so several writes can share one transaction.
    """

    partition: Partition
    record_type: type

    def __init__(
        self,
        store: SyntaxStore,
        connection: Optional[aiosqlite.Connection] = None,
    ) -> None:
        self._store = store
        self._conn = connection

    def bind(self: RepoT, connection: aiosqlite.Connection) -> RepoT:
        """Return a copy of this repository that works inside *connection*."""
        return type(self)(self._store, connection)

    # ── Internal helpers ──────────────────────────────────────────────────

    @asynccontextmanager
    async def _session(self, operation: str, key: object = None) -> AsyncIterator[aiosqlite.Connection]:
        """
        Scope one logical action and translate storage errors.

        StoreOpenError and other SyntaxDBError subclasses pass through
        untouched; sqlite errors become DuplicateKeyError / OperationError
        carrying the operation and key.
        """
        try:
            if self._conn is not None:
                yield self._conn
            else:
                async with self._store.transaction() as conn:
                    yield conn
        except sqlite3.IntegrityError as exc:
            message = self._failure_message(operation, key, exc)
            if "UNIQUE" in str(exc).upper():
                raise DuplicateKeyError(message, operation, key) from exc
            raise OperationError(message, operation, key) from exc
        except sqlite3.Error as exc:
            raise OperationError(self._failure_message(operation, key, exc), operation, key) from exc

    def _failure_message(self, operation: str, key: object, exc: Exception) -> str:
        target = f"{self.partition.name} record"
        if key is not None:
            target += f" {key}"
        return f"Failed to {operation} {target}: {exc}"

    def _column_values(self, record: RecordT) -> list:
        values = []
        for attr in self.partition.columns.values():
            value = getattr(record, attr)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, bool):
                value = int(value)
            values.append(value)
        return values

    def _describe(self, record: RecordT) -> str:
        """Unique-key description of *record* for error messages."""
        values = dict(zip(self.partition.columns, self._column_values(record)))
        parts = []
        for idx in self.partition.indices:
            if idx.unique:
                parts.extend(f"{col}={values[col]!r}" for col in idx.columns)
        return "(" + ", ".join(parts) + ")"

    def _to_record(self, row: aiosqlite.Row) -> RecordT:
        return self.record_type.from_dict(json.loads(row["data"]), record_id=row["id"])

    async def _find_one(self, index_name: str, *values: object) -> Optional[RecordT]:
        records = await self._query_index(index_name, values, limit_one=True)
        return records[0] if records else None

    async def _find_many(self, index_name: str, *values: object) -> list[RecordT]:
        return await self._query_index(index_name, values)

    async def _query_index(
        self,
        index_name: str,
        values: tuple,
        limit_one: bool = False,
    ) -> list[RecordT]:
        idx = self.partition.index(index_name)
        where = " AND ".join(f"{col} = ?" for col in idx.columns)
        sql = f"SELECT id, data FROM {self.partition.name} WHERE {where} ORDER BY id"
        if limit_one:
            sql += " LIMIT 1"
        key = ", ".join(f"{col}={v!r}" for col, v in zip(idx.columns, values))
        async with self._session(f"look up by {index_name}", f"({key})") as conn:
            async with conn.execute(sql, values) as cur:
                rows = await cur.fetchall()
        return [self._to_record(r) for r in rows]

    # ── Public API ────────────────────────────────────────────────────────

    async def get_by_id(self, record_id: int) -> Optional[RecordT]:
        """Return the record with *record_id*, or None if there is none."""
        sql = f"SELECT id, data FROM {self.partition.name} WHERE id = ?"
        async with self._session("get", f"id={record_id}") as conn:
            async with conn.execute(sql, (record_id,)) as cur:
                row = await cur.fetchone()
        return self._to_record(row) if row else None

    async def get_all(self) -> list[RecordT]:
        """Every record in the partition (ordered by id, though callers must not rely on it)."""
        sql = f"SELECT id, data FROM {self.partition.name} ORDER BY id"
        async with self._session("list") as conn:
            async with conn.execute(sql) as cur:
                rows = await cur.fetchall()
        return [self._to_record(r) for r in rows]

    async def count(self) -> int:
        async with self._session("count") as conn:
            async with conn.execute(f"SELECT COUNT(*) FROM {self.partition.name}") as cur:
                row = await cur.fetchone()
        return row[0]

    async def create(self, record: RecordT) -> int:
        """
        Insert *record* and return its newly assigned id.

        Any id already set on *record* is ignored.

        Raises:
            DuplicateKeyError: a unique index (name or composite key) already holds the key.
            OperationError:    any other storage failure.
        """
        cols = list(self.partition.columns)
        placeholders = ", ".join(["?"] * (len(cols) + 1))
        sql = (
            f"INSERT INTO {self.partition.name} ({', '.join(cols + ['data'])}) "
            f"VALUES ({placeholders})"
        )
        params = (*self._column_values(record), json.dumps(record.to_dict()))
        async with self._session("create", self._describe(record)) as conn:
            async with conn.execute(sql, params) as cur:
                new_id = cur.lastrowid
        logger.debug("Created %s id=%s %s", self.partition.name, new_id, self._describe(record))
        return new_id

    async def update(self, record: RecordT) -> None:
        """
        Replace the stored record that has ``record.id``.

        Raises:
            InvalidArgumentError: *record* has no id (checked before any storage access).
            DuplicateKeyError:    the new values clash with another record's unique key.
        """
        record_id = getattr(record, "id", None)
        if record_id is None:
            raise InvalidArgumentError(
                f"Cannot update {self.partition.name} record without an id"
            )
        cols = list(self.partition.columns)
        placeholders = ", ".join(["?"] * (len(cols) + 2))
        assignments = ", ".join(f"{c} = excluded.{c}" for c in cols + ["data"])
        sql = (
            f"INSERT INTO {self.partition.name} ({', '.join(['id'] + cols + ['data'])}) "
            f"VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {assignments}"
        )
        params = (record_id, *self._column_values(record), json.dumps(record.to_dict()))
        async with self._session("update", f"id={record_id}") as conn:
            await conn.execute(sql, params)

    async def delete(self, record_id: int) -> None:
        """Remove the record; deleting an unknown id is not an error."""
        async with self._session("delete", f"id={record_id}") as conn:
            await conn.execute(f"DELETE FROM {self.partition.name} WHERE id = ?", (record_id,))
