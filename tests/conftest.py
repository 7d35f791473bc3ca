"""
Test configuration and fixtures for the URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortener_app.database.connection import create_session_factory
from shortener_app.queue.strategies import InMemoryQueue
from shortener_app.storage.strategies import DatabaseURLStorage, FileURLStorage, InMemoryURLStorage


@pytest.fixture
def memory_storage():
    return InMemoryURLStorage()


@pytest.fixture
def file_path(tmp_path):
    return str(tmp_path / "urls.jsonl")


@pytest.fixture
def file_storage(file_path):
    storage = FileURLStorage(file_path)
    yield storage
    storage.close()


@pytest.fixture
def db_storage(tmp_path):
    """
    Fresh SQLite database per test.
    Same table and unique index as PostgreSQL.
    """
    storage = DatabaseURLStorage(create_session_factory(f"sqlite:///{tmp_path / 'test.db'}"))
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "file", "database"])
def any_storage(request):
    """Runs a test once per storage backend"""
    fixture_name = {
        "memory": "memory_storage",
        "file": "file_storage",
        "database": "db_storage",
    }[request.param]
    return request.getfixturevalue(fixture_name)


@pytest.fixture
def client(db_storage):
    """
    Test client backed by the database storage and an in-memory delete
    queue, with the delete worker running in the app's event loop.
    """
    app = create_app(storage=db_storage, queue=InMemoryQueue(), run_delete_worker=True)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def memory_client(memory_storage):
    """Test client backed by the in-memory storage"""
    app = create_app(storage=memory_storage, queue=InMemoryQueue(), run_delete_worker=True)

    with TestClient(app) as test_client:
        yield test_client
