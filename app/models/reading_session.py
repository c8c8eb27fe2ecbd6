"""Reading session database model."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDMixin


class ReadingSession(Base, UUIDMixin, TimestampMixin):
    """One reading interval. Append-only; closed at most once.

    Correlated with ReadingProgress only through (user_id, book_id).
    """

    __tablename__ = "reading_sessions"

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

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    pages_read: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )  # seconds

    __table_args__ = (
        CheckConstraint("pages_read >= 0", name="pages_read_non_negative"),
        CheckConstraint("duration >= 0", name="duration_non_negative"),
        Index("idx_reading_sessions_created_at", "created_at"),
    )

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def __repr__(self) -> str:
        state = "open" if self.is_open else f"{self.duration}s"
        return f"<ReadingSession {self.id} user={self.user_id} book={self.book_id} {state}>"
