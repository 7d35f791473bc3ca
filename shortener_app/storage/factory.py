"""
Factory for creating URL storage instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
import logging

from sqlalchemy.exc import SQLAlchemyError

from .exceptions import StorageError
from .strategies import URLStorageStrategy, InMemoryURLStorage, FileURLStorage, DatabaseURLStorage
from shortener_app.config import settings
from shortener_app.database.connection import create_session_factory

logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    """Available URL storage backends"""
    AUTO = "auto"
    MEMORY = "memory"
    FILE = "file"
    DATABASE = "database"


class StorageFactory:
    """
    Simple factory for creating URL storage instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: URLStorageStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: StorageBackend) -> URLStorageStrategy:
        """
        Create or return cached storage instance.

        AUTO picks the database when a DSN is configured and reachable,
        then the file log when a path is configured, then memory.

        Args:
            backend: Type of storage backend (from enum)

        Returns:
            Singleton storage instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == StorageBackend.AUTO:
            cls._instance = cls._create_auto()
        elif backend == StorageBackend.MEMORY:
            cls._instance = InMemoryURLStorage()
            logger.info("In-memory URL storage initialized")
        elif backend == StorageBackend.FILE:
            if not settings.file_storage_path:
                raise ValueError("file storage backend requires FILE_STORAGE_PATH")
            cls._instance = FileURLStorage(settings.file_storage_path)
        elif backend == StorageBackend.DATABASE:
            if not settings.database_dsn:
                raise ValueError("database storage backend requires DATABASE_DSN")
            cls._instance = DatabaseURLStorage(create_session_factory(settings.database_dsn))
            logger.info("Database URL storage initialized")
        else:
            raise ValueError(f"Unknown storage backend: {backend}")

        return cls._instance

    @classmethod
    def _create_auto(cls) -> URLStorageStrategy:
        if settings.database_dsn:
            try:
                storage = DatabaseURLStorage(create_session_factory(settings.database_dsn))
                logger.info("Database URL storage initialized")
                return storage
            except (StorageError, SQLAlchemyError) as e:
                logger.warning("Database storage unavailable (%s), falling back", e)

        if settings.file_storage_path:
            return FileURLStorage(settings.file_storage_path)

        logger.info("In-memory URL storage initialized")
        return InMemoryURLStorage()

    @classmethod
    def clear_instance(cls):
        """Close and clear cached instance (for testing and shutdown)"""
        if cls._instance is not None:
            cls._instance.close()
        cls._instance = None
