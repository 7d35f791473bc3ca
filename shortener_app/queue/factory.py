"""
Factory for creating queue instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
import logging

import redis
import redis.asyncio as aioredis

from .strategies import QueueStrategy, RedisStreamQueue, InMemoryQueue
from shortener_app.config import settings

logger = logging.getLogger(__name__)


class QueueBackend(Enum):
    """Available queue backends"""
    REDIS_STREAMS = "redis_streams"
    MEMORY = "memory"


class QueueFactory:
    """
    Simple factory for creating queue instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: QueueStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: QueueBackend) -> QueueStrategy:
        """
        Create or return cached queue instance.

        Falls back to the in-memory queue when Redis cannot be reached.

        Args:
            backend: Type of queue backend (from enum)

        Returns:
            Singleton queue instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == QueueBackend.REDIS_STREAMS:
            try:
                # Test connection immediately with a short-lived sync client
                check_client = redis.from_url(
                    settings.redis_url,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                check_client.ping()
                check_client.close()

                redis_client = aioredis.from_url(settings.redis_url, decode_responses=False)
                cls._instance = RedisStreamQueue(redis_client, settings.queue_consumer_group)
                logger.info("Redis delete queue initialized")

            except redis.RedisError as e:
                logger.warning("Redis connection failed (%s), falling back to in-memory queue", e)
                cls._instance = InMemoryQueue(maxsize=settings.delete_queue_size)

        elif backend == QueueBackend.MEMORY:
            cls._instance = InMemoryQueue(maxsize=settings.delete_queue_size)
            logger.info("In-memory delete queue initialized")

        else:
            raise ValueError(f"Unknown queue backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
