"""Repository package for data access."""

from app.repositories.book_repo import BookRepository
from app.repositories.progress_repo import ProgressRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.user_repo import UserRepository

__all__ = [
    "UserRepository",
    "BookRepository",
    "ProgressRepository",
    "SessionRepository",
]
