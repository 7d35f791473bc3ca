import logging
from typing import List, Optional, Tuple

from shortener_app.config import settings
from shortener_app.queue.models import DeleteTask
from shortener_app.queue.strategies import QueueStrategy
from shortener_app.schemas.url import BatchShortenItem, BatchShortenResult, StatsResponse, UserURL
from shortener_app.services.short_code_factory import ShortCodeFactory
from shortener_app.storage.exceptions import URLAlreadyExistsError
from shortener_app.storage.models import URLRecord
from shortener_app.storage.strategies import URLStorageStrategy

logger = logging.getLogger(__name__)


def extract_short_code(value: str) -> str:
    """Accept either a bare code or a full short URL and return the code."""
    return value.strip().rstrip("/").rsplit("/", 1)[-1]


class URLService:
    """
    URL Service with dependency injection for storage and queue.

    Storage and queue strategies are injected (not created internally),
    so routers and tests can swap implementations freely.
    """

    def __init__(
        self,
        storage: URLStorageStrategy,
        queue: Optional[QueueStrategy] = None,
        base_url: Optional[str] = None
    ):
        """
        Initialize URL service with dependencies.

        Args:
            storage: URL storage strategy
            queue: Queue strategy for async deletes (optional)
            base_url: Prefix for short URLs (defaults to settings.base_url)
        """
        self.storage = storage
        self.queue = queue
        self.prefix = base_url.rstrip("/") + "/" if base_url else settings.short_url_prefix
        self.short_code_strategy = ShortCodeFactory.create_strategy()

    def short_url(self, short_code: str) -> str:
        return self.prefix + short_code

    async def shorten(
        self,
        original_url: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> Tuple[str, bool]:
        """Create a short URL.

        Returns:
            (short_url, created). created is False when the original URL was
            already stored; short_url then points at the existing record.
        """
        record = URLRecord(
            short_code=self.short_code_strategy.generate(original_url),
            original_url=original_url,
            user_id=user_id,
            correlation_id=correlation_id,
        )

        try:
            short_code = await self.storage.save(record)
        except URLAlreadyExistsError as e:
            return self.short_url(e.short_code), False

        return self.short_url(short_code), True

    async def shorten_batch(
        self,
        items: List[BatchShortenItem],
        user_id: Optional[str] = None
    ) -> List[BatchShortenResult]:
        """Shorten every item independently, preserving input order.

        Duplicates resolve to the existing short URL. There is no atomicity
        across items: a failure leaves earlier items saved.
        """
        results = []
        for item in items:
            short_url, _ = await self.shorten(item.original_url, user_id, item.correlation_id)
            results.append(BatchShortenResult(correlation_id=item.correlation_id, short_url=short_url))
        return results

    async def resolve(self, short_code: str) -> str:
        """Original URL for a code; storage errors propagate to the router"""
        return await self.storage.load(short_code)

    async def list_user_urls(self, user_id: str) -> List[UserURL]:
        owned = await self.storage.list_by_owner(user_id)
        return [
            UserURL(short_url=self.short_url(item.short_code), original_url=item.original_url)
            for item in owned
        ]

    async def schedule_delete(self, user_id: str, short_codes: List[str]) -> bool:
        """
        Queue a soft delete and return immediately.

        Returns False only if the task could not be queued; the outcome of
        the delete itself is never reported back.
        """
        codes = [extract_short_code(code) for code in short_codes if code and code.strip()]
        if not codes:
            return True

        if self.queue is None:
            raise RuntimeError("URLService was created without a delete queue")

        task = DeleteTask(user_id=user_id, short_codes=codes)
        published = await self.queue.publish(settings.delete_queue_name, task)
        if not published:
            logger.error("Could not queue delete of %d codes for user %s", len(codes), user_id)
        return published

    async def ping(self) -> None:
        await self.storage.ping()

    async def get_stats(self) -> StatsResponse:
        stats = await self.storage.stats()
        return StatsResponse(urls=stats.url_count, users=stats.user_count)
