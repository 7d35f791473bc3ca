from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String
from sqlalchemy.sql import func
from shortener_app.database.connection import Base


class URL(Base):
    """
    Mapping of a short code to its original URL.

    Rows are never physically removed: deletion flips is_deleted to True
    and it never flips back.
    """
    __tablename__ = "map_url"

    id = Column(Integer, primary_key=True, autoincrement=True)
    correlation_id = Column(String, nullable=True)
    short_code = Column(String, nullable=False, unique=True)
    original_url = Column(String, nullable=False)
    user_id = Column(String, nullable=True, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        # Same original URL must never get a second row
        Index("idx_original_url", "original_url", unique=True),
    )
