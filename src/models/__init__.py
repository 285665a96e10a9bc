"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.link import EMBEDDING_DIMENSIONS, Link
from models.user import User

__all__ = ["EMBEDDING_DIMENSIONS", "Base", "Link", "TimestampMixin", "User"]
