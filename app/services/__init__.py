"""Services package for business logic."""

from app.services.progress_service import ProgressService
from app.services.session_service import SessionService

__all__ = ["ProgressService", "SessionService"]
