"""SQLAlchemy models package."""

from app.models.base import Base
from app.models.book import Book
from app.models.progress import ReadingProgress
from app.models.reading_session import ReadingSession
from app.models.user import User

__all__ = [
    "Base",
    "User",
    "Book",
    "ReadingProgress",
    "ReadingSession",
]
