"""Reading session schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.base import ensure_aware


class SessionOpen(BaseModel):
    """Request to open a reading session."""

    start_time: datetime | None = Field(
        default=None,
        description="When reading started; defaults to now",
    )


class SessionClose(BaseModel):
    """Request to close a reading session."""

    end_time: datetime | None = Field(default=None, description="When reading stopped; defaults to now")
    pages_read: int = Field(default=0, ge=0, description="Pages read during the session")
    duration: int | None = Field(
        default=None,
        ge=0,
        description="Active reading seconds; overrides wall-clock elapsed time (e.g. pauses)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "pages_read": 12,
                "duration": 900,
            }
        }
    )


class SessionResponse(BaseModel):
    """Reading session response."""

    id: UUID
    user_id: UUID
    book_id: UUID
    start_time: datetime
    end_time: datetime | None = None
    pages_read: int
    duration: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite returns naive timestamps
        return ensure_aware(value) if value is not None else None
