"""Tests for the SQLite document store."""

import asyncio
import json
import pytest
from pathlib import Path

from neatrip.config import ConflictError, ErrorCode, StorageError

from .repository import DocumentStore


@pytest.fixture
async def store(tmp_path: Path):
    """Create a test store with temporary database."""
    store = DocumentStore(tmp_path / "test.db")
    await store.initialize()
    yield store
    await store.close()


async def test_initialize_creates_tables(store: DocumentStore):
    """Test that initialize creates the records table."""
    conn = await store._get_connection()
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table'"
    )
    tables = {row[0] for row in await cursor.fetchall()}

    assert "records" in tables
    assert "unique_keys" in tables


async def test_insert_and_get(store: DocumentStore):
    """Test inserting and retrieving a record."""
    user = await store.insert("users", {"email": "ana@example.com", "name": "Ana"})

    assert user["id"]
    assert user["createdAt"] == user["updatedAt"]

    fetched = await store.get("users", user["id"])
    assert fetched == user


async def test_get_missing_returns_none(store: DocumentStore):
    assert await store.get("users", "nope") is None


async def test_unknown_collection(store: DocumentStore):
    with pytest.raises(StorageError):
        await store.insert("widgets", {"a": 1})


async def test_find_where_order_limit_offset(store: DocumentStore):
    """Test filters, ordering and pagination."""
    for i in range(5):
        await store.insert("posts", {"authorId": "a" if i % 2 == 0 else "b", "rank": i})

    by_a = await store.find("posts", where={"authorId": "a"})
    assert [p["rank"] for p in by_a] == [0, 2, 4]

    newest_first = await store.find("posts", order_by={"rank": "desc"})
    assert [p["rank"] for p in newest_first] == [4, 3, 2, 1, 0]

    page = await store.find("posts", order_by={"rank": "asc"}, limit=2, offset=1)
    assert [p["rank"] for p in page] == [1, 2]


async def test_update_merges_and_keeps_identity(store: DocumentStore):
    place = await store.insert("places", {"name": "Old", "category": "CAFE"})

    updated = await store.update(
        "places", place["id"], {"name": "New", "id": "hijack", "createdAt": "x"}
    )

    assert updated is not None
    assert updated["id"] == place["id"]
    assert updated["createdAt"] == place["createdAt"]
    assert updated["name"] == "New"
    assert updated["category"] == "CAFE"
    assert await store.update("places", "missing", {"name": "x"}) is None


async def test_delete_and_delete_where(store: DocumentStore):
    like = await store.insert("likes", {"userId": "u1", "postId": "p1"})
    await store.insert("likes", {"userId": "u2", "postId": "p1"})
    await store.insert("likes", {"userId": "u2", "postId": "p2"})

    assert await store.delete("likes", like["id"]) is True
    assert await store.delete("likes", like["id"]) is False

    removed = await store.delete_where("likes", {"postId": "p1"})
    assert removed == 1
    assert await store.count("likes") == 1


async def test_count_and_exists(store: DocumentStore):
    assert await store.count("follows") == 0
    await store.insert("follows", {"followerId": "a", "followingId": "b"})

    assert await store.count("follows") == 1
    assert await store.count("follows", {"followerId": "a"}) == 1
    assert await store.exists("follows", {"followerId": "a", "followingId": "b"})
    assert not await store.exists("follows", {"followerId": "b"})


async def test_backup_and_restore(store: DocumentStore):
    user = await store.insert("users", {"email": "ana@example.com"})
    snapshot = await store.backup()

    await store.clear()
    assert await store.count("users") == 0

    await store.restore(snapshot)
    assert await store.get("users", user["id"]) == user


async def test_restore_rejects_garbage(store: DocumentStore):
    with pytest.raises(StorageError):
        await store.restore("not json")
    with pytest.raises(StorageError):
        await store.restore('{"widgets": []}')


async def test_restore_rejects_record_without_id(store: DocumentStore):
    """A bad backup leaves the existing data untouched."""
    user = await store.insert("users", {"email": "ana@example.com"})

    with pytest.raises(StorageError) as exc_info:
        await store.restore(json.dumps({"users": [{"name": "no id"}]}))
    assert exc_info.value.code == ErrorCode.STORAGE_RESTORE_FAILED

    # A later write must not commit a half-done restore
    await store.insert("places", {"name": "Bled"})
    assert await store.get("users", user["id"]) == user
    assert await store.count("users") == 1


@pytest.mark.parametrize(
    "snapshot",
    [
        {"users": {"id": "u1"}},
        {"users": ["not a record"]},
        {"users": [{"id": "u1"}, {"id": "u1"}]},
        {"users": [{"id": "u1", "email": "a@x.io"}, {"id": "u2", "email": "a@x.io"}]},
    ],
)
async def test_restore_rejects_malformed_collections(store: DocumentStore, snapshot):
    await store.insert("users", {"email": "keep@example.com"})

    with pytest.raises(StorageError) as exc_info:
        await store.restore(json.dumps(snapshot))

    assert exc_info.value.code == ErrorCode.STORAGE_RESTORE_FAILED
    assert await store.count("users") == 1


async def test_restore_rebuilds_unique_keys(store: DocumentStore):
    await store.insert("users", {"email": "ana@example.com"})
    snapshot = await store.backup()

    await store.restore(snapshot)

    with pytest.raises(ConflictError):
        await store.insert("users", {"email": "ana@example.com"})


async def test_unique_pair_rejects_duplicate(store: DocumentStore):
    await store.insert("likes", {"userId": "u1", "postId": "p1"})

    with pytest.raises(ConflictError) as exc_info:
        await store.insert("likes", {"userId": "u1", "postId": "p1"})

    assert exc_info.value.details["fields"] == ["userId", "postId"]
    assert await store.count("likes") == 1
    # Another pair is fine
    await store.insert("likes", {"userId": "u2", "postId": "p1"})


async def test_concurrent_duplicate_inserts_keep_one(store: DocumentStore):
    results = await asyncio.gather(
        *(store.insert("follows", {"followerId": "a", "followingId": "b"}) for _ in range(5)),
        return_exceptions=True,
    )

    assert sum(isinstance(r, dict) for r in results) == 1
    assert all(isinstance(r, (dict, ConflictError)) for r in results)
    assert await store.count("follows") == 1


async def test_null_unique_field_is_not_keyed(store: DocumentStore):
    await store.insert("users", {"email": "a@example.com", "username": None})
    await store.insert("users", {"email": "b@example.com", "username": None})

    assert await store.count("users") == 2


async def test_update_respects_and_moves_unique_keys(store: DocumentStore):
    ana = await store.insert("users", {"email": "ana@example.com"})
    ben = await store.insert("users", {"email": "ben@example.com"})

    with pytest.raises(ConflictError):
        await store.update("users", ben["id"], {"email": "ana@example.com"})
    assert (await store.get("users", ben["id"]))["email"] == "ben@example.com"

    await store.update("users", ana["id"], {"email": "ana@new.example.com"})
    await store.update("users", ben["id"], {"email": "ana@example.com"})
    assert (await store.get("users", ben["id"]))["email"] == "ana@example.com"


async def test_delete_releases_unique_keys(store: DocumentStore):
    like = await store.insert("likes", {"userId": "u1", "postId": "p1"})
    await store.delete("likes", like["id"])
    await store.insert("likes", {"userId": "u1", "postId": "p1"})

    await store.delete_where("likes", {"postId": "p1"})
    await store.insert("likes", {"userId": "u1", "postId": "p1"})
    assert await store.count("likes") == 1
