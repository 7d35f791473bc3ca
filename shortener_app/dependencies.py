"""
FastAPI dependencies for dependency injection.

Storage and queue instances are created once in the application lifespan
and kept on app.state; these functions hand them to routes.
"""

from fastapi import Depends, Request

from shortener_app.queue.strategies import QueueStrategy
from shortener_app.services.url_service import URLService
from shortener_app.storage.strategies import URLStorageStrategy


def get_storage(request: Request) -> URLStorageStrategy:
    """Storage backend selected at startup"""
    return request.app.state.storage


def get_queue(request: Request) -> QueueStrategy:
    """Delete queue selected at startup"""
    return request.app.state.delete_queue


def get_url_service(
    storage: URLStorageStrategy = Depends(get_storage),
    queue: QueueStrategy = Depends(get_queue)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controller depends on service, service depends on infrastructure.
    """
    return URLService(storage=storage, queue=queue)
