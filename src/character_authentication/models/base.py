"""
SQLAlchemy declarative base for authentication models.

Core models and every authenticator's own models share this metadata so a
single create_all() builds the whole schema.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all authentication SQLAlchemy models."""

    pass
