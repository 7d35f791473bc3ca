"""
Relational database plumbing (SQLAlchemy engine, sessions, declarative Base).
"""

from .connection import Base, create_session_factory

__all__ = ["Base", "create_session_factory"]
