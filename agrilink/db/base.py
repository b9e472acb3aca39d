"""SQLAlchemy Declarative Base — shared base class for all AgriLink ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Timestamps are timezone-aware UTC

Design Decisions:
    - Generic Uuid/JSON column types: same models run on Postgres and on the
      in-memory SQLite used by tests
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all AgriLink ORM models."""
    pass
