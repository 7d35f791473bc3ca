import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from shortener_app.api import internal, redirect, shorten, user_urls
from shortener_app.config import settings
from shortener_app.delete_processor.delete_worker import DeleteWorker
from shortener_app.logging_config import configure_logging
from shortener_app.middleware import GzipRequestMiddleware, RequestLoggingMiddleware, register_error_handlers
from shortener_app.queue.factory import QueueBackend, QueueFactory
from shortener_app.queue.strategies import QueueStrategy
from shortener_app.storage.factory import StorageBackend, StorageFactory
from shortener_app.storage.strategies import URLStorageStrategy

logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[URLStorageStrategy] = None,
    queue: Optional[QueueStrategy] = None,
    run_delete_worker: Optional[bool] = None
) -> FastAPI:
    """
    Build the application.

    Storage and queue default to the configured backends; tests pass their
    own instances.
    """
    if run_delete_worker is None:
        run_delete_worker = settings.run_delete_worker

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_storage = storage is None
        owns_queue = queue is None

        app.state.storage = storage or StorageFactory.create(StorageBackend(settings.storage_backend))
        app.state.delete_queue = queue or QueueFactory.create(QueueBackend(settings.queue_backend))
        logger.info(
            "Starting %s %s (%s): storage=%s, queue=%s",
            settings.app_name, settings.app_version, settings.environment,
            type(app.state.storage).__name__, type(app.state.delete_queue).__name__
        )

        worker_task = None
        if run_delete_worker:
            app.state.delete_worker = DeleteWorker(app.state.delete_queue, app.state.storage)
            worker_task = asyncio.create_task(app.state.delete_worker.start())

        yield

        if worker_task is not None:
            app.state.delete_worker.stop()
            worker_task.cancel()
            try:
                await worker_task
            except asyncio.CancelledError:
                pass

        if owns_queue:
            await app.state.delete_queue.close()
            QueueFactory.clear_instance()
        if owns_storage:
            StorageFactory.clear_instance()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener service built with FastAPI",
        debug=settings.debug,
        lifespan=lifespan
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(GzipRequestMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    register_error_handlers(app)

    ######## Include routers
    # Fixed paths first: /{short_code} would swallow /ping otherwise
    app.include_router(internal.router)
    app.include_router(user_urls.router)
    app.include_router(shorten.router)
    app.include_router(redirect.router)

    return app


configure_logging(settings.log_level)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    host, _, port = settings.server_address.rpartition(":")
    uvicorn.run("main:app", host=host or "localhost", port=int(port or 8080))
