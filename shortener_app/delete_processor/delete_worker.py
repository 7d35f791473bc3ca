"""
Delete Worker

Consumes DeleteTask messages and soft-deletes the codes through the
configured storage backend.

Fire-and-forget contract:
- The HTTP caller already received 202 before the task is processed
- Failures are logged, never retried, and the message is acknowledged anyway
"""

import asyncio
import logging
import signal
import sys
from typing import List

from shortener_app.config import settings
from shortener_app.queue.models import DeleteTask
from shortener_app.queue.strategies import QueueStrategy
from shortener_app.storage.exceptions import StorageError
from shortener_app.storage.strategies import URLStorageStrategy

logger = logging.getLogger(__name__)


class DeleteWorker:
    """
    Batch consumer for the delete queue.

    Tasks are processed in the order they were consumed, which for one
    queue is the order they were published.
    """

    def __init__(
        self,
        queue: QueueStrategy,
        storage: URLStorageStrategy,
        queue_name: str = None,
        batch_size: int = None,
        block_time: int = 1000
    ):
        """
        Args:
            queue: Queue strategy for consuming messages
            storage: Storage strategy that performs the deletes
            queue_name: Queue to read (defaults to settings.delete_queue_name)
            batch_size: Tasks per iteration (defaults to settings.delete_batch_size)
            block_time: Milliseconds to wait for a task before looping
        """
        self.queue = queue
        self.storage = storage
        self.queue_name = queue_name or settings.delete_queue_name
        self.batch_size = batch_size or settings.delete_batch_size
        self.block_time = block_time
        self.running = False
        self.processed_count = 0
        self.failed_count = 0

    async def start(self):
        """Run until stop() is called or the task is cancelled"""
        self.running = True
        logger.info(
            "Delete worker started (queue=%s, batch_size=%d)",
            self.queue_name, self.batch_size
        )

        while self.running:
            try:
                tasks = await self.queue.consume(
                    self.queue_name,
                    batch_size=self.batch_size,
                    block_time=self.block_time
                )
                if tasks:
                    await self.process_batch(tasks)
            except asyncio.CancelledError:
                logger.info("Delete worker cancelled")
                break
            except Exception:
                logger.exception("Delete worker loop error")
                await asyncio.sleep(1)

        logger.info("Delete worker stopped (processed=%d, failed=%d)",
                    self.processed_count, self.failed_count)

    async def process_batch(self, tasks: List[DeleteTask]):
        """Apply every task, then acknowledge the whole batch"""
        for task in tasks:
            try:
                await self.storage.delete_bulk(task.user_id, task.short_codes)
                self.processed_count += 1
                logger.debug("Deleted %d codes for user %s", len(task.short_codes), task.user_id)
            except StorageError as e:
                self.failed_count += 1
                logger.error(
                    "Delete of %d codes for user %s failed: %s",
                    len(task.short_codes), task.user_id, e
                )

        message_ids = [task.message_id for task in tasks if task.message_id]
        if message_ids:
            await self.queue.ack(self.queue_name, message_ids)

    def stop(self):
        """Stop the worker"""
        self.running = False

    def _signal_handler(self, signum, frame):
        logger.info("Received signal %s, shutting down", signum)
        self.stop()


async def main():
    """
    Standalone entry point, for deployments where the API publishes to Redis.

    Usage:
        python -m shortener_app.delete_processor.delete_worker
    """
    from shortener_app.logging_config import configure_logging
    from shortener_app.queue.factory import QueueFactory, QueueBackend
    from shortener_app.storage.factory import StorageFactory, StorageBackend

    configure_logging(settings.log_level)
    logger.info("Queue backend: %s, storage backend: %s",
                settings.queue_backend, settings.storage_backend)

    queue = QueueFactory.create(QueueBackend(settings.queue_backend))
    storage = StorageFactory.create(StorageBackend(settings.storage_backend))

    worker = DeleteWorker(queue=queue, storage=storage)
    signal.signal(signal.SIGINT, worker._signal_handler)
    signal.signal(signal.SIGTERM, worker._signal_handler)

    try:
        await worker.start()
    except Exception:
        logger.exception("Fatal worker error")
        sys.exit(1)
    finally:
        await queue.close()
        StorageFactory.clear_instance()


if __name__ == "__main__":
    asyncio.run(main())
