"""Reading progress schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.base import ensure_aware


class ProgressReport(BaseModel):
    """Request to report reading progress."""

    current_page: int = Field(..., ge=0, description="Page the reader is on (clamped to total_pages)")
    total_pages: int = Field(..., ge=0, description="Total pages in book; must be positive")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "current_page": 42,
                "total_pages": 350,
            }
        }
    )


class ProgressResponse(BaseModel):
    """Reading progress response."""

    id: UUID
    user_id: UUID
    book_id: UUID
    current_page: int
    total_pages: int
    progress: Decimal = Field(description="Percentage read, two decimals")
    last_read_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("last_read_at", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class RecentRead(BaseModel):
    """Recent read with book info."""

    book_id: UUID
    book_title: str
    book_author: str | None = None
    current_page: int
    total_pages: int
    progress: Decimal
    last_read_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("last_read_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class ReadingStats(BaseModel):
    """User's reading statistics."""

    total_books_started: int
    total_books_completed: int
    total_sessions: int
    total_pages_read: int
    total_reading_time_seconds: int
    total_reading_time_formatted: str  # "2h 35m"
    current_streak_days: int
    longest_streak_days: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_books_started": 15,
                "total_books_completed": 8,
                "total_sessions": 64,
                "total_pages_read": 2310,
                "total_reading_time_seconds": 86400,
                "total_reading_time_formatted": "24h 0m",
                "current_streak_days": 5,
                "longest_streak_days": 21,
            }
        }
    )
