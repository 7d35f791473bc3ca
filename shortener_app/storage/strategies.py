"""
URL storage strategies using Strategy Pattern.

Allows switching between interchangeable backends:
- In-memory: Development/testing, lost on restart
- File: In-memory map plus an append-only JSON-lines log replayed on startup
- Database: SQLAlchemy table with a unique index on original_url
"""

from abc import ABC, abstractmethod
from typing import Dict, List
import json
import logging
import os
import threading

from sqlalchemy import bindparam, distinct, func, text, update
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shortener_app.database.connection import Base
from shortener_app.models.url import URL
from .exceptions import StorageError, URLAlreadyExistsError, URLDeletedError, URLNotFoundError
from .models import OwnedURL, StorageStats, URLRecord

logger = logging.getLogger(__name__)


class URLStorageStrategy(ABC):
    """
    Abstract base class for URL storage strategies.

    The service layer and routers only talk to this interface, so a backend
    can be swapped via configuration without touching them.

    Ownership and soft delete are only enforced by the database backend;
    the in-memory and file backends keep the owner but ignore deletes.
    """

    @abstractmethod
    async def save(self, record: URLRecord) -> str:
        """
        Persist a record keyed by its short code.

        Returns:
            The short code

        Raises:
            URLAlreadyExistsError: original_url is already stored (carries the existing code)
            StorageError: backend failure
        """
        pass

    @abstractmethod
    async def load(self, short_code: str) -> str:
        """
        Resolve a short code.

        Raises:
            URLNotFoundError: unknown code
            URLDeletedError: code exists but was soft-deleted
        """
        pass

    @abstractmethod
    async def list_by_owner(self, user_id: str) -> List[OwnedURL]:
        """All non-deleted records owned by `user_id` (empty list when none)"""
        pass

    @abstractmethod
    async def delete_bulk(self, user_id: str, short_codes: List[str]) -> None:
        """Soft-delete the given codes, but only those owned by `user_id`"""
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Raise StorageError if the backend is unreachable"""
        pass

    @abstractmethod
    async def stats(self) -> StorageStats:
        """Aggregate URL and owner counts"""
        pass

    def close(self) -> None:
        """Release backend resources (no-op by default)"""


class InMemoryURLStorage(URLStorageStrategy):
    """
    In-memory implementation using a dict guarded by a lock.

    Pros:
    - Zero configuration
    - Fast, good for development and tests

    Cons:
    - Lost on restart
    - Delete is a no-op (no soft-delete support)
    """

    def __init__(self):
        self._records: Dict[str, URLRecord] = {}
        self._lock = threading.Lock()

    async def save(self, record: URLRecord) -> str:
        with self._lock:
            self._insert(record)
        return record.short_code

    def _insert(self, record: URLRecord) -> None:
        # Codes are derived from the URL, so an existing code means an existing URL
        if record.short_code in self._records:
            raise URLAlreadyExistsError(record.short_code)
        self._records[record.short_code] = record.model_copy()

    async def load(self, short_code: str) -> str:
        with self._lock:
            record = self._records.get(short_code)
        if record is None:
            raise URLNotFoundError(short_code)
        if record.is_deleted:
            raise URLDeletedError(short_code)
        return record.original_url

    async def list_by_owner(self, user_id: str) -> List[OwnedURL]:
        with self._lock:
            return [
                OwnedURL(short_code=r.short_code, original_url=r.original_url)
                for r in self._records.values()
                if r.user_id == user_id and not r.is_deleted
            ]

    async def delete_bulk(self, user_id: str, short_codes: List[str]) -> None:
        logger.debug(
            "%s does not support delete, ignoring %d codes for user %s",
            type(self).__name__, len(short_codes), user_id
        )

    async def ping(self) -> None:
        return None

    async def stats(self) -> StorageStats:
        with self._lock:
            owners = {r.user_id for r in self._records.values() if r.user_id}
            return StorageStats(url_count=len(self._records), user_count=len(owners))


class FileURLStorage(InMemoryURLStorage):
    """
    In-memory map backed by an append-only JSON-lines log.

    Every successful save appends one line:
        {"short_url": ..., "original_url": ..., "user_id": ...}

    On startup the whole log is replayed in order; the last line for a
    code wins.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._replay()
        self._file = open(self.path, "a", encoding="utf-8")
        logger.info("File storage opened: %s (%d records)", self.path, len(self._records))

    def _replay(self) -> None:
        if not os.path.exists(self.path):
            return

        with open(self.path, "r", encoding="utf-8") as log_file:
            for line_no, line in enumerate(log_file, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    record = URLRecord(
                        short_code=data["short_url"],
                        original_url=data["original_url"],
                        user_id=data.get("user_id") or None,
                    )
                except (ValueError, KeyError) as e:
                    raise StorageError(f"{self.path}:{line_no}: bad record: {e}") from e
                self._records[record.short_code] = record

    async def save(self, record: URLRecord) -> str:
        with self._lock:
            self._insert(record)
            line = json.dumps({
                "short_url": record.short_code,
                "original_url": record.original_url,
                "user_id": record.user_id or "",
            })
            try:
                self._file.write(line + "\n")
                self._file.flush()
            except OSError as e:
                # Keep map and log consistent
                del self._records[record.short_code]
                raise StorageError(f"Failed to append to {self.path}: {e}") from e
        return record.short_code

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class DatabaseURLStorage(URLStorageStrategy):
    """
    Relational implementation (PostgreSQL in production, SQLite in tests).

    - Unique index on original_url rejects duplicates
    - Soft delete: is_deleted flag, updated in one transaction per batch
    - Schema is created on startup and existing tables are left alone
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Args:
            session_factory: Factory for creating database sessions
        """
        self.session_factory = session_factory
        self.engine = session_factory.kw["bind"]
        self._init_database()

    def _init_database(self):
        """Create table and indexes if they don't exist"""
        try:
            Base.metadata.create_all(bind=self.engine)
        except (ProgrammingError, OperationalError) as e:
            # Another process may have created it between check and create
            if "already exists" not in str(e):
                raise StorageError(f"Schema creation failed: {e}") from e
            logger.info("Schema already exists, skipping creation")

    async def save(self, record: URLRecord) -> str:
        with self.session_factory() as db:
            db.add(URL(
                correlation_id=record.correlation_id,
                short_code=record.short_code,
                original_url=record.original_url,
                user_id=record.user_id,
                is_deleted=False,
            ))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                existing = db.query(URL.short_code).filter(
                    URL.original_url == record.original_url
                ).scalar()
                raise URLAlreadyExistsError(existing or record.short_code)
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageError(f"Failed to save URL: {e}") from e
        return record.short_code

    async def load(self, short_code: str) -> str:
        try:
            with self.session_factory() as db:
                row = db.query(URL.original_url, URL.is_deleted).filter(
                    URL.short_code == short_code
                ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load URL: {e}") from e

        if row is None:
            raise URLNotFoundError(short_code)
        if row.is_deleted:
            raise URLDeletedError(short_code)
        return row.original_url

    async def list_by_owner(self, user_id: str) -> List[OwnedURL]:
        try:
            with self.session_factory() as db:
                rows = db.query(URL.short_code, URL.original_url).filter(
                    URL.user_id == user_id,
                    URL.is_deleted == False  # noqa: E712
                ).order_by(URL.id).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list URLs: {e}") from e

        return [OwnedURL(short_code=r.short_code, original_url=r.original_url) for r in rows]

    async def delete_bulk(self, user_id: str, short_codes: List[str]) -> None:
        """
        Mark codes as deleted in a single transaction.

        One prepared UPDATE is executed per code; any failure rolls the
        whole batch back.
        """
        if not short_codes:
            return

        table = URL.__table__
        stmt = (
            update(table)
            .where(table.c.short_code == bindparam("b_short_code"))
            .where(table.c.user_id == bindparam("b_user_id"))
            .values(is_deleted=True)
        )
        params = [{"b_short_code": code, "b_user_id": user_id} for code in short_codes]

        try:
            with self.session_factory() as db:
                with db.begin():
                    db.execute(stmt, params)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete URLs: {e}") from e

    async def ping(self) -> None:
        try:
            with self.session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StorageError(f"Database is unreachable: {e}") from e

    async def stats(self) -> StorageStats:
        try:
            with self.session_factory() as db:
                url_count = db.query(func.count(distinct(URL.short_code))).scalar()
                user_count = db.query(func.count(distinct(URL.user_id))).filter(
                    URL.user_id.isnot(None),
                    URL.user_id != ""
                ).scalar()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to compute stats: {e}") from e

        return StorageStats(url_count=url_count or 0, user_count=user_count or 0)

    def close(self) -> None:
        self.engine.dispose()
