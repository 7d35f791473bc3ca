"""
Tests for URLService, independent of HTTP.
"""
import asyncio

import pytest

from shortener_app.config import settings
from shortener_app.queue.strategies import InMemoryQueue
from shortener_app.schemas.url import BatchShortenItem
from shortener_app.services.short_code_factory import derive_short_code
from shortener_app.services.url_service import URLService, extract_short_code

BASE_URL = "http://short.test"


@pytest.fixture
def queue():
    return InMemoryQueue()


@pytest.fixture
def service(memory_storage, queue):
    return URLService(storage=memory_storage, queue=queue, base_url=BASE_URL)


class TestShorten:

    def test_created(self, service):
        short_url, created = asyncio.run(service.shorten("https://example.com/", "alice"))

        assert created is True
        assert short_url == f"{BASE_URL}/{derive_short_code('https://example.com/')}"

    def test_existing(self, service):
        first, _ = asyncio.run(service.shorten("https://example.com/", "alice"))
        second, created = asyncio.run(service.shorten("https://example.com/", "bob"))

        assert created is False
        assert second == first

    def test_base_url_trailing_slash(self, memory_storage):
        service = URLService(storage=memory_storage, base_url=BASE_URL + "/")

        assert service.short_url("abc") == f"{BASE_URL}/abc"

    def test_batch_preserves_order(self, service):
        items = [
            BatchShortenItem(correlation_id=str(i), original_url=f"https://{i}.example/")
            for i in range(5)
        ]

        results = asyncio.run(service.shorten_batch(items, "alice"))

        assert [r.correlation_id for r in results] == ["0", "1", "2", "3", "4"]
        assert results[3].short_url == service.short_url(derive_short_code("https://3.example/"))

    def test_list_user_urls(self, service):
        asyncio.run(service.shorten("https://a.example/", "alice"))
        asyncio.run(service.shorten("https://b.example/", "bob"))

        urls = asyncio.run(service.list_user_urls("alice"))

        assert [u.original_url for u in urls] == ["https://a.example/"]
        assert urls[0].short_url.startswith(BASE_URL + "/")

    def test_stats(self, service):
        asyncio.run(service.shorten("https://a.example/", "alice"))
        asyncio.run(service.shorten("https://b.example/", "alice"))

        stats = asyncio.run(service.get_stats())

        assert (stats.urls, stats.users) == (2, 1)


class TestScheduleDelete:

    def test_publishes_task(self, service, queue):
        async def scenario():
            ok = await service.schedule_delete("alice", ["abc", f"{BASE_URL}/def", "  "])
            return ok, await queue.consume(settings.delete_queue_name, batch_size=10, block_time=10)

        ok, tasks = asyncio.run(scenario())

        assert ok is True
        assert len(tasks) == 1
        assert tasks[0].user_id == "alice"
        assert tasks[0].short_codes == ["abc", "def"]

    def test_nothing_to_delete(self, service, queue):
        async def scenario():
            ok = await service.schedule_delete("alice", [])
            return ok, await queue.get_queue_length(settings.delete_queue_name)

        assert asyncio.run(scenario()) == (True, 0)

    def test_without_queue(self, memory_storage):
        service = URLService(storage=memory_storage)

        with pytest.raises(RuntimeError):
            asyncio.run(service.schedule_delete("alice", ["abc"]))


@pytest.mark.parametrize("value,expected", [
    ("abc", "abc"),
    ("http://localhost:8080/abc", "abc"),
    ("http://localhost:8080/abc/", "abc"),
    ("  abc  ", "abc"),
])
def test_extract_short_code(value, expected):
    assert extract_short_code(value) == expected
