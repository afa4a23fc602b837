"""
Declarative base shared by all ORM models.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Insert-time timestamp filled in by the database."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
