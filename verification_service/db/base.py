"""SQLAlchemy Declarative Base - shared base class and column types for all ORM models.

Invariants:
    - All models inherit from Base
    - UTCDateTime always binds UTC and always returns timezone-aware UTC values

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - UTCDateTime decorator: SQLite drops tzinfo on round-trip, PostgreSQL does not;
      normalizing here keeps expiry comparisons identical on both
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """DateTime(timezone=True) that is UTC-aware on the way in and out."""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all verification ORM models."""
    pass
