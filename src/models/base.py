"""SQLAlchemy declarative base and the timestamp mixin shared by users and links."""
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """
    Mixin that adds timezone-aware created_at and updated_at columns.

    Defaults use clock_timestamp() rather than now(), so links saved one after
    another inside a single transaction still get distinct, ordered created_at
    values. Listing and the 7-day stats window rely on that ordering.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        onupdate=func.clock_timestamp(),
        nullable=False,
    )
