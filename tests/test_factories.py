"""
Tests for backend selection in StorageFactory and QueueFactory.
"""
import pytest
import redis

from shortener_app.config import settings
from shortener_app.queue import factory as queue_factory
from shortener_app.queue.factory import QueueBackend, QueueFactory
from shortener_app.queue.strategies import InMemoryQueue, RedisStreamQueue
from shortener_app.storage.factory import StorageBackend, StorageFactory
from shortener_app.storage.strategies import DatabaseURLStorage, FileURLStorage, InMemoryURLStorage


@pytest.fixture(autouse=True)
def fresh_factories():
    StorageFactory.clear_instance()
    QueueFactory.clear_instance()
    yield
    StorageFactory.clear_instance()
    QueueFactory.clear_instance()


@pytest.fixture
def storage_settings(monkeypatch):
    """Start every test with no DSN and no file configured"""
    monkeypatch.setattr(settings, "database_dsn", "")
    monkeypatch.setattr(settings, "file_storage_path", "")
    return monkeypatch


class TestStorageFactory:

    def test_auto_with_nothing_configured_uses_memory(self, storage_settings):
        storage = StorageFactory.create(StorageBackend.AUTO)

        assert type(storage) is InMemoryURLStorage

    def test_auto_prefers_database(self, storage_settings, tmp_path):
        storage_settings.setattr(settings, "database_dsn", f"sqlite:///{tmp_path / 'auto.db'}")
        storage_settings.setattr(settings, "file_storage_path", str(tmp_path / "urls.jsonl"))

        storage = StorageFactory.create(StorageBackend.AUTO)

        assert isinstance(storage, DatabaseURLStorage)

    def test_auto_unreachable_database_falls_back_to_file(self, storage_settings, tmp_path):
        # Parent directory does not exist, so SQLite cannot open the file
        storage_settings.setattr(settings, "database_dsn", f"sqlite:///{tmp_path / 'missing' / 'x.db'}")
        storage_settings.setattr(settings, "file_storage_path", str(tmp_path / "urls.jsonl"))

        storage = StorageFactory.create(StorageBackend.AUTO)

        assert isinstance(storage, FileURLStorage)

    def test_auto_unreachable_database_without_file_uses_memory(self, storage_settings, tmp_path):
        storage_settings.setattr(settings, "database_dsn", f"sqlite:///{tmp_path / 'missing' / 'x.db'}")

        storage = StorageFactory.create(StorageBackend.AUTO)

        assert type(storage) is InMemoryURLStorage

    def test_file_backend_requires_path(self, storage_settings):
        with pytest.raises(ValueError):
            StorageFactory.create(StorageBackend.FILE)

    def test_database_backend_requires_dsn(self, storage_settings):
        with pytest.raises(ValueError):
            StorageFactory.create(StorageBackend.DATABASE)

    def test_explicit_file_backend(self, storage_settings, tmp_path):
        storage_settings.setattr(settings, "file_storage_path", str(tmp_path / "urls.jsonl"))

        assert isinstance(StorageFactory.create(StorageBackend.FILE), FileURLStorage)

    def test_instance_is_cached_until_cleared(self, storage_settings):
        first = StorageFactory.create(StorageBackend.MEMORY)

        assert StorageFactory.create(StorageBackend.MEMORY) is first
        StorageFactory.clear_instance()
        assert StorageFactory.create(StorageBackend.MEMORY) is not first


class FakeSyncRedis:
    def __init__(self, reachable):
        self.reachable = reachable
        self.closed = False

    def ping(self):
        if not self.reachable:
            raise redis.ConnectionError("Connection refused")
        return True

    def close(self):
        self.closed = True


class TestQueueFactory:

    def test_memory_backend(self):
        queue = QueueFactory.create(QueueBackend.MEMORY)

        assert isinstance(queue, InMemoryQueue)
        assert queue.maxsize == settings.delete_queue_size

    def test_unreachable_redis_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setattr(queue_factory.redis, "from_url", lambda *args, **kwargs: FakeSyncRedis(False))

        queue = QueueFactory.create(QueueBackend.REDIS_STREAMS)

        assert isinstance(queue, InMemoryQueue)

    def test_reachable_redis(self, monkeypatch):
        sync_client = FakeSyncRedis(True)
        monkeypatch.setattr(queue_factory.redis, "from_url", lambda *args, **kwargs: sync_client)
        monkeypatch.setattr(queue_factory.aioredis, "from_url", lambda *args, **kwargs: object())

        queue = QueueFactory.create(QueueBackend.REDIS_STREAMS)

        assert isinstance(queue, RedisStreamQueue)
        assert queue.consumer_group == settings.queue_consumer_group
        assert sync_client.closed

    def test_instance_is_cached(self):
        assert QueueFactory.create(QueueBackend.MEMORY) is QueueFactory.create(QueueBackend.MEMORY)
