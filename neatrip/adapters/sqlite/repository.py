"""
SQLite Document Store - Named collections of JSON records.

Features:
- Async operations via aiosqlite
- One table, records keyed by (collection, id)
- Unique fields per collection, enforced by a keyed side table
- Equality filters, ordering and pagination
- JSON backup/restore of the whole store
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from neatrip.config import ConflictError, ErrorCode, StorageError

logger = logging.getLogger(__name__)

__all__ = ["COLLECTIONS", "UNIQUE_FIELDS", "DocumentStore"]

COLLECTIONS: tuple[str, ...] = (
    "users",
    "places",
    "place_media",
    "posts",
    "post_media",
    "likes",
    "comments",
    "shares",
    "follows",
    "saved_places",
    "notifications",
)

# Field groups that identify at most one record; groups with a null field are not keyed
UNIQUE_FIELDS: dict[str, tuple[tuple[str, ...], ...]] = {
    "users": (("email",), ("username",)),
    "likes": (("userId", "postId"),),
    "follows": (("followerId", "followingId"),),
    "saved_places": (("userId", "placeId"),),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unique_keys(
    collection: str, record: dict[str, Any]
) -> Iterator[tuple[tuple[str, ...], str]]:
    for fields in UNIQUE_FIELDS.get(collection, ()):
        values = [record.get(f) for f in fields]
        if any(v is None for v in values):
            continue
        yield fields, json.dumps(values)


class DocumentStore:
    """
    SQLite-backed JSON document store.

    Writes are serialized and each runs in its own transaction.

    Example:
        >>> store = DocumentStore("data/neatrip.db")
        >>> await store.initialize()
        >>> user = await store.insert("users", {"email": "ana@example.com"})
        >>> await store.find("users", where={"email": "ana@example.com"})
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            try:
                self._connection = await aiosqlite.connect(str(self.db_path))
            except Exception as e:
                raise StorageError(f"Cannot open database: {self.db_path}") from e
            self._connection.row_factory = aiosqlite.Row
        return self._connection

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Hold the write lock; commit on success, roll back on any failure."""
        async with self._write_lock:
            conn = await self._get_connection()
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        conn = await self._get_connection()

        await conn.executescript("""
            CREATE TABLE IF NOT EXISTS records (
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL,
                PRIMARY KEY (collection, id)
            );

            CREATE INDEX IF NOT EXISTS idx_records_collection_created
                ON records(collection, created_at);

            CREATE TABLE IF NOT EXISTS unique_keys (
                collection TEXT NOT NULL,
                fields TEXT NOT NULL,
                value TEXT NOT NULL,
                record_id TEXT NOT NULL,
                PRIMARY KEY (collection, fields, value)
            );

            CREATE INDEX IF NOT EXISTS idx_unique_keys_record
                ON unique_keys(collection, record_id);
        """)

        await conn.commit()
        logger.info("Document store initialized: %s", self.db_path)

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise StorageError(
                f"Unknown collection: {collection}",
                {"collection": collection},
                code=ErrorCode.STORAGE_UNKNOWN_COLLECTION,
            )

    @staticmethod
    async def _add_keys(
        conn: aiosqlite.Connection, collection: str, record: dict[str, Any]
    ) -> None:
        """Claim the record's unique keys, or raise ConflictError."""
        for fields, value in _unique_keys(collection, record):
            try:
                await conn.execute(
                    "INSERT INTO unique_keys (collection, fields, value, record_id) "
                    "VALUES (?, ?, ?, ?)",
                    (collection, ",".join(fields), value, record["id"]),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Duplicate {', '.join(fields)} in {collection}",
                    {"collection": collection, "fields": list(fields)},
                ) from e

    @staticmethod
    async def _drop_keys(
        conn: aiosqlite.Connection, collection: str, record_ids: list[str]
    ) -> None:
        if collection in UNIQUE_FIELDS and record_ids:
            await conn.executemany(
                "DELETE FROM unique_keys WHERE collection = ? AND record_id = ?",
                [(collection, record_id) for record_id in record_ids],
            )

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a record.

        Generates `id`, `createdAt` and `updatedAt` unless supplied.

        Returns:
            The stored record

        Raises:
            ConflictError: A unique field group is already taken
        """
        self._check_collection(collection)

        now = _now()
        record = {
            "id": uuid.uuid4().hex,
            "createdAt": now,
            "updatedAt": now,
            **data,
        }

        async with self._transaction() as conn:
            try:
                await conn.execute(
                    "INSERT INTO records (collection, id, data, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (collection, record["id"], json.dumps(record), record["createdAt"]),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Duplicate id in {collection}",
                    {"collection": collection, "fields": ["id"]},
                ) from e
            await self._add_keys(conn, collection, record)
        return record

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Get a record by ID."""
        self._check_collection(collection)
        conn = await self._get_connection()

        cursor = await conn.execute(
            "SELECT data FROM records WHERE collection = ? AND id = ?",
            (collection, record_id),
        )
        row = await cursor.fetchone()
        return json.loads(row["data"]) if row else None

    async def find(
        self,
        collection: str,
        where: dict[str, Any] | None = None,
        order_by: dict[str, str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Find records matching every `where` field by equality.

        Args:
            collection: Collection name
            where: Field -> value equality filters
            order_by: Field -> "asc" | "desc"; applied in insertion order
            limit: Maximum records
            offset: Records to skip

        Returns:
            Matching records (insertion order unless ordered)
        """
        self._check_collection(collection)
        conn = await self._get_connection()

        cursor = await conn.execute(
            "SELECT data FROM records WHERE collection = ? ORDER BY created_at, rowid",
            (collection,),
        )
        rows = await cursor.fetchall()
        records = [json.loads(row["data"]) for row in rows]

        if where:
            records = [r for r in records if _matches(r, where)]

        if order_by:
            # Stable sorts applied from the least to the most significant key
            for field, direction in reversed(list(order_by.items())):
                records.sort(
                    key=lambda r, f=field: _sort_key(r.get(f)),
                    reverse=direction.lower() == "desc",
                )

        if offset:
            records = records[offset:]
        if limit is not None:
            records = records[:limit]

        return records

    async def find_one(
        self, collection: str, where: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Find the first record matching `where`."""
        records = await self.find(collection, where=where, limit=1)
        return records[0] if records else None

    async def update(
        self, collection: str, record_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """
        Merge fields into a record.

        `id` and `createdAt` are immutable.

        Returns:
            Updated record, or None if it does not exist

        Raises:
            ConflictError: The change takes a unique field group already in use
        """
        async with self._transaction() as conn:
            record = await self.get(collection, record_id)
            if record is None:
                return None

            changes = {k: v for k, v in data.items() if k not in ("id", "createdAt")}
            record.update(changes)
            record["updatedAt"] = _now()

            await conn.execute(
                "UPDATE records SET data = ? WHERE collection = ? AND id = ?",
                (json.dumps(record), collection, record_id),
            )
            await self._drop_keys(conn, collection, [record_id])
            await self._add_keys(conn, collection, record)
        return record

    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record. Returns True if it existed."""
        self._check_collection(collection)

        async with self._transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM records WHERE collection = ? AND id = ?",
                (collection, record_id),
            )
            await self._drop_keys(conn, collection, [record_id])
        return cursor.rowcount > 0

    async def delete_where(self, collection: str, where: dict[str, Any]) -> int:
        """Delete all records matching `where`. Returns the count removed."""
        async with self._transaction() as conn:
            ids = [r["id"] for r in await self.find(collection, where=where)]
            if not ids:
                return 0

            await conn.executemany(
                "DELETE FROM records WHERE collection = ? AND id = ?",
                [(collection, record_id) for record_id in ids],
            )
            await self._drop_keys(conn, collection, ids)
        return len(ids)

    async def count(self, collection: str, where: dict[str, Any] | None = None) -> int:
        """Count records matching `where`."""
        if not where:
            self._check_collection(collection)
            conn = await self._get_connection()
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM records WHERE collection = ?", (collection,)
            )
            row = await cursor.fetchone()
            return row[0] if row else 0
        return len(await self.find(collection, where=where))

    async def exists(self, collection: str, where: dict[str, Any]) -> bool:
        """Check whether any record matches `where`."""
        return await self.find_one(collection, where) is not None

    async def clear(self) -> None:
        """Remove every record from every collection."""
        async with self._transaction() as conn:
            await conn.execute("DELETE FROM records")
            await conn.execute("DELETE FROM unique_keys")
        logger.warning("Document store cleared: %s", self.db_path)

    async def backup(self) -> str:
        """Serialize all collections to a JSON string."""
        snapshot = {name: await self.find(name) for name in COLLECTIONS}
        return json.dumps(snapshot)

    async def restore(self, backup: str) -> None:
        """
        Replace the store contents with a backup produced by `backup()`.

        The backup is checked in full before anything is touched; the swap
        itself is a single transaction.

        Raises:
            StorageError: Backup is not valid JSON, names unknown collections,
                or holds malformed, duplicate or conflicting records
        """
        try:
            snapshot = json.loads(backup)
        except json.JSONDecodeError as e:
            raise StorageError(
                "Backup is not valid JSON", code=ErrorCode.STORAGE_RESTORE_FAILED
            ) from e

        if not isinstance(snapshot, dict):
            raise StorageError(
                "Backup must be an object of collections",
                code=ErrorCode.STORAGE_RESTORE_FAILED,
            )

        rows: list[tuple[str, str, str, str]] = []
        keys: list[tuple[str, str, str, str]] = []
        seen_ids: set[tuple[str, str]] = set()
        seen_keys: set[tuple[str, str, str]] = set()

        for name, records in snapshot.items():
            self._check_collection(name)
            if not isinstance(records, list):
                raise _restore_error(f"Collection {name} must be a list", name)

            for record in records:
                if not isinstance(record, dict) or not isinstance(record.get("id"), str):
                    raise _restore_error(f"Record in {name} has no string id", name)
                if (name, record["id"]) in seen_ids:
                    raise _restore_error(
                        f"Duplicate id {record['id']} in {name}", name, record["id"]
                    )
                seen_ids.add((name, record["id"]))

                for fields, value in _unique_keys(name, record):
                    key = (name, ",".join(fields), value)
                    if key in seen_keys:
                        raise _restore_error(
                            f"Duplicate {', '.join(fields)} in {name}", name, record["id"]
                        )
                    seen_keys.add(key)
                    keys.append((*key, record["id"]))

                rows.append(
                    (name, record["id"], json.dumps(record), record.get("createdAt") or _now())
                )

        async with self._transaction() as conn:
            await conn.execute("DELETE FROM records")
            await conn.execute("DELETE FROM unique_keys")
            await conn.executemany(
                "INSERT INTO records (collection, id, data, created_at) VALUES (?, ?, ?, ?)",
                rows,
            )
            await conn.executemany(
                "INSERT INTO unique_keys (collection, fields, value, record_id) "
                "VALUES (?, ?, ?, ?)",
                keys,
            )
        logger.info("Restored %d records into %s", len(rows), self.db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None


def _restore_error(message: str, collection: str, record_id: str | None = None) -> StorageError:
    details: dict[str, Any] = {"collection": collection}
    if record_id is not None:
        details["id"] = record_id
    return StorageError(message, details, code=ErrorCode.STORAGE_RESTORE_FAILED)


def _matches(record: dict[str, Any], where: dict[str, Any]) -> bool:
    return all(record.get(field) == value for field, value in where.items())


def _sort_key(value: Any) -> tuple[int, Any]:
    # None sorts first; mixed types compare by their string form
    if value is None:
        return (0, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    return (2, str(value))
