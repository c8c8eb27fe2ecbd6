"""Reading progress database model."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDMixin, utcnow


class ReadingProgress(Base, UUIDMixin, TimestampMixin):
    """User's reading position in a book. One row per (user, book)."""

    __tablename__ = "reading_progress"

    # User and book relationship
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Progress tracking
    current_page: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    total_pages: Mapped[int] = mapped_column(Integer, nullable=False)
    progress: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0"),
        server_default="0",
    )

    last_read_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        # One progress record per user per book; the upsert conflict target
        UniqueConstraint("user_id", "book_id", name="uq_reading_progress_user_book"),
        CheckConstraint("current_page >= 0", name="current_page_non_negative"),
        CheckConstraint("total_pages >= 0", name="total_pages_non_negative"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="progress_range"),
        Index("idx_reading_progress_user_last_read", "user_id", "last_read_at"),
    )

    @property
    def is_completed(self) -> bool:
        return self.progress >= 100

    def __repr__(self) -> str:
        return f"<ReadingProgress user={self.user_id} book={self.book_id} {self.progress}%>"
