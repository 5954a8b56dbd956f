import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from substore.shared.config.settings import Settings
from substore.shared.core.exceptions import StorageIOError
from substore.shared.infrastructure.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    create_key_value_store,
)
from substore.shared.infrastructure.storage.file_store import key_to_filename

fakeredis = pytest.importorskip("fakeredis")


class UnreachableRedis:
    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def set(self, key, value):
        raise RedisConnectionError("connection refused")

    async def delete(self, key):
        raise RedisConnectionError("connection refused")


@pytest.mark.asyncio
async def test_in_memory_store_basic_operations():
    storage = InMemoryKeyValueStore()

    assert await storage.get("missing") is None
    await storage.set("a", b"1")
    assert await storage.get("a") == b"1"
    await storage.delete("a")
    await storage.delete("a")
    assert storage.keys() == []


@pytest.mark.asyncio
async def test_in_memory_store_requires_bytes():
    storage = InMemoryKeyValueStore()

    with pytest.raises(TypeError):
        await storage.set("a", "text")


@pytest.mark.asyncio
async def test_file_store_round_trip(tmp_path):
    storage = FileKeyValueStore(tmp_path / "state")

    assert await storage.get("@subscription_state_v1") is None
    await storage.set("@subscription_state_v1", b'{"version":1}')
    await storage.set("@subscription_state_v1", b'{"version":1,"data":{}}')

    assert await storage.get("@subscription_state_v1") == b'{"version":1,"data":{}}'
    assert [p.name for p in (tmp_path / "state").iterdir()] == [key_to_filename("@subscription_state_v1")]

    await storage.delete("@subscription_state_v1")
    await storage.delete("@subscription_state_v1")
    assert await storage.get("@subscription_state_v1") is None


def test_file_names_are_safe_and_distinct():
    first = key_to_filename("@subscription_state_v1")
    second = key_to_filename("subscription_state_v1")

    assert "/" not in key_to_filename("../../etc/passwd")
    assert first != second


@pytest.mark.asyncio
async def test_redis_store_round_trip():
    client = fakeredis.aioredis.FakeRedis(decode_responses=False)
    storage = RedisKeyValueStore(client, namespace="test:")

    await storage.set("@subscription_state_v1", b"payload")

    assert await storage.get("@subscription_state_v1") == b"payload"
    assert await client.get("test:@subscription_state_v1") == b"payload"

    await storage.delete("@subscription_state_v1")
    assert await storage.get("@subscription_state_v1") is None


@pytest.mark.asyncio
async def test_redis_errors_become_retryable_storage_errors():
    storage = RedisKeyValueStore(UnreachableRedis())

    with pytest.raises(StorageIOError) as exc_info:
        await storage.get("@subscription_state_v1")
    assert exc_info.value.retryable is True

    with pytest.raises(StorageIOError):
        await storage.set("@subscription_state_v1", b"x")
    with pytest.raises(StorageIOError):
        await storage.delete("@subscription_state_v1")


def test_factory_selects_backend(tmp_path):
    memory = create_key_value_store(Settings(ENVIRONMENT="test", STORAGE_BACKEND="memory"))
    files = create_key_value_store(
        Settings(ENVIRONMENT="test", STORAGE_BACKEND="file", STORAGE_FILE_DIR=str(tmp_path))
    )

    assert isinstance(memory, InMemoryKeyValueStore)
    assert isinstance(files, FileKeyValueStore)
