"""Link model for storing saved URLs with scraped content and embeddings."""
from typing import TYPE_CHECKING

from pgvector.sqlalchemy import Vector
from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.user import User

# Dimensionality of Gemini embeddings requested by services.ai_service
EMBEDDING_DIMENSIONS = 768


class Link(Base, TimestampMixin):
    """Link model - a saved URL plus its extracted and generated metadata."""

    __tablename__ = "links"
    __table_args__ = (
        Index("ix_links_created_at", "created_at"),
        Index("ix_links_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    favicon: Mapped[str | None] = mapped_column(Text, nullable=True)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    read_time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # All-zero when AI was unavailable at ingestion time
    content_embedding: Mapped[list[float] | None] = mapped_column(
        Vector(EMBEDDING_DIMENSIONS),
        nullable=True,
        deferred=True,
    )

    user: Mapped["User"] = relationship(back_populates="links")
