"""Pydantic schemas package."""

from app.schemas.common import ErrorDetail, ErrorResponse
from app.schemas.progress import ProgressReport, ProgressResponse, ReadingStats, RecentRead
from app.schemas.reading_session import SessionClose, SessionOpen, SessionResponse

__all__ = [
    # Common
    "ErrorResponse",
    "ErrorDetail",
    # Progress
    "ProgressReport",
    "ProgressResponse",
    "RecentRead",
    "ReadingStats",
    # Sessions
    "SessionOpen",
    "SessionClose",
    "SessionResponse",
]
