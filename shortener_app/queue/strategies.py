"""
Queue strategies using Strategy Pattern.
Allows switching between different queue backends (Redis Streams, In-Memory).
"""

from abc import ABC, abstractmethod
from typing import List
import asyncio
import logging
import socket

from .models import DeleteTask

logger = logging.getLogger(__name__)


class QueueStrategy(ABC):
    """
    Abstract base class for queue strategies.

    This is the Strategy Pattern interface - the delete handler publishes
    and the delete worker consumes without knowing which backend is used.
    """

    @abstractmethod
    async def publish(self, queue_name: str, message: DeleteTask) -> bool:
        """
        Publish a message to the queue.

        Args:
            queue_name: Name of the queue
            message: DeleteTask to publish

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def consume(
        self,
        queue_name: str,
        batch_size: int = 1,
        block_time: int = 1000
    ) -> List[DeleteTask]:
        """
        Consume messages from the queue.

        Args:
            queue_name: Name of the queue
            batch_size: Maximum number of messages to retrieve
            block_time: Time to wait for the first message (milliseconds)

        Returns:
            List of DeleteTask messages, oldest first
        """
        pass

    @abstractmethod
    async def ack(self, queue_name: str, message_ids: List[str]) -> bool:
        """
        Acknowledge messages (mark as processed).

        Args:
            queue_name: Name of the queue
            message_ids: List of message IDs to acknowledge

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    async def get_queue_length(self, queue_name: str) -> int:
        """Number of pending messages in queue"""
        pass

    async def close(self) -> None:
        """Release connections (no-op by default)"""


class RedisStreamQueue(QueueStrategy):
    """
    Redis Streams implementation for message queue.

    Lets the API process publish and a separate worker process consume:
    1. Producer publishes messages using XADD
    2. Consumer reads messages using XREADGROUP
    3. Consumer acknowledges messages using XACK
    """

    def __init__(self, redis_client, consumer_group: str = "delete_workers"):
        """
        Initialize Redis Streams queue.

        Args:
            redis_client: redis.asyncio client instance
            consumer_group: Name of consumer group for workers
        """
        self.redis = redis_client
        self.consumer_group = consumer_group
        self.consumer_name = f"worker-{socket.gethostname()}-{id(self)}"
        self._initialized_streams = set()

    async def _ensure_stream_exists(self, queue_name: str):
        """Create stream and consumer group if they don't exist"""
        if queue_name in self._initialized_streams:
            return

        try:
            await self.redis.xgroup_create(
                name=queue_name,
                groupname=self.consumer_group,
                id='0',
                mkstream=True
            )
            logger.info("Created Redis stream: %s", queue_name)
        except Exception as e:
            # Group might already exist, that's OK
            if "BUSYGROUP" not in str(e):
                raise

        self._initialized_streams.add(queue_name)

    async def publish(self, queue_name: str, message: DeleteTask) -> bool:
        try:
            await self._ensure_stream_exists(queue_name)
            await self.redis.xadd(queue_name, {'data': message.model_dump_json()})
            return True
        except Exception as e:
            logger.error("Redis publish error: %s", e)
            return False

    async def consume(
        self,
        queue_name: str,
        batch_size: int = 1,
        block_time: int = 1000
    ) -> List[DeleteTask]:
        """
        Read messages never delivered to this consumer group ('>').
        Messages stay pending until acknowledged.
        """
        try:
            await self._ensure_stream_exists(queue_name)

            messages = await self.redis.xreadgroup(
                groupname=self.consumer_group,
                consumername=self.consumer_name,
                streams={queue_name: '>'},
                count=batch_size,
                block=block_time
            )
        except Exception as e:
            logger.error("Redis consume error: %s", e)
            return []

        tasks = []
        for _stream_name, stream_messages in messages or []:
            for message_id, message_data in stream_messages:
                if isinstance(message_id, bytes):
                    message_id = message_id.decode('utf-8')
                try:
                    task = DeleteTask.model_validate_json(message_data[b'data'])
                except Exception as e:
                    logger.warning("Dropping unparsable message %s: %s", message_id, e)
                    await self.ack(queue_name, [message_id])
                    continue
                task.message_id = message_id
                tasks.append(task)

        return tasks

    async def ack(self, queue_name: str, message_ids: List[str]) -> bool:
        try:
            if not message_ids:
                return True
            await self.redis.xack(queue_name, self.consumer_group, *message_ids)
            return True
        except Exception as e:
            logger.error("Redis ack error: %s", e)
            return False

    async def get_queue_length(self, queue_name: str) -> int:
        try:
            info = await self.redis.xinfo_stream(queue_name)
            return info['length']
        except Exception:
            return 0

    async def close(self) -> None:
        await self.redis.aclose()


class InMemoryQueue(QueueStrategy):
    """
    In-memory bounded FIFO queues built on asyncio.Queue.

    Pros:
    - No external dependencies
    - Publishers wait when a queue is full (backpressure)

    Cons:
    - Not persistent (lost on restart)
    - Only visible inside one process, so the worker must run in-process
    """

    def __init__(self, maxsize: int = 1024):
        self.maxsize = maxsize
        self._queues = {}

    def _get_queue(self, queue_name: str) -> asyncio.Queue:
        """Get or create queue"""
        if queue_name not in self._queues:
            self._queues[queue_name] = asyncio.Queue(maxsize=self.maxsize)
        return self._queues[queue_name]

    async def publish(self, queue_name: str, message: DeleteTask) -> bool:
        await self._get_queue(queue_name).put(message)
        return True

    async def consume(
        self,
        queue_name: str,
        batch_size: int = 1,
        block_time: int = 1000
    ) -> List[DeleteTask]:
        queue = self._get_queue(queue_name)

        try:
            first = await asyncio.wait_for(queue.get(), timeout=block_time / 1000)
        except asyncio.TimeoutError:
            return []

        messages = [first]
        while len(messages) < batch_size and not queue.empty():
            messages.append(queue.get_nowait())
        return messages

    async def ack(self, queue_name: str, message_ids: List[str]) -> bool:
        """Messages are removed on consume, nothing to acknowledge"""
        return True

    async def get_queue_length(self, queue_name: str) -> int:
        return self._get_queue(queue_name).qsize()
