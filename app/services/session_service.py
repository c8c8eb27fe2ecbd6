"""Reading session service."""

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import ensure_owner
from app.core.exceptions import (
    ConflictError,
    ConstraintViolationError,
    ReferenceNotFoundError,
    ValidationError,
)
from app.models.base import ensure_aware, utcnow
from app.repositories.book_repo import BookRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.user_repo import UserRepository
from app.schemas.reading_session import SessionResponse

logger = structlog.get_logger(__name__)


def elapsed_seconds(start_time: datetime, end_time: datetime) -> int:
    """Whole seconds between two instants, never negative."""
    delta = ensure_aware(end_time) - ensure_aware(start_time)
    return max(0, int(delta.total_seconds()))


class SessionService:
    """Service for reading session operations on behalf of one caller."""

    def __init__(self, db: AsyncSession, caller_id: UUID):
        self.db = db
        self.caller_id = caller_id
        self.session_repo = SessionRepository(db, caller_id)
        self.book_repo = BookRepository(db)
        self.user_repo = UserRepository(db)

    async def _commit(self, action: str, **context) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error("Session write rejected", action=action, error=str(e.orig), **context)
            raise ConstraintViolationError(
                f"Session {action} violated a store constraint",
                details=context,
            ) from e

    async def open_session(
        self,
        user_id: UUID,
        book_id: UUID,
        start_time: datetime | None = None,
    ) -> SessionResponse:
        """Start a new session. Earlier open sessions do not block this one."""
        ensure_owner(self.caller_id, user_id, "open a session for")

        if not await self.user_repo.exists(user_id):
            raise ReferenceNotFoundError("user", str(user_id))
        if not await self.book_repo.exists(book_id):
            raise ReferenceNotFoundError("book", str(book_id))

        try:
            session = await self.session_repo.create(
                user_id=user_id,
                book_id=book_id,
                start_time=ensure_aware(start_time) if start_time else utcnow(),
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ConstraintViolationError(
                "Session open violated a store constraint",
                details={"user_id": str(user_id), "book_id": str(book_id)},
            ) from e

        response = SessionResponse.model_validate(session)
        await self._commit("open", user_id=str(user_id), book_id=str(book_id))

        logger.info(
            "Reading session opened",
            session_id=str(response.id),
            user_id=str(user_id),
            book_id=str(book_id),
        )
        return response

    async def close_session(
        self,
        session_id: UUID,
        end_time: datetime | None = None,
        pages_read: int = 0,
        duration: int | None = None,
    ) -> SessionResponse:
        """Close an owned session, recording pages read and duration.

        ``duration`` overrides the wall-clock elapsed time when given.
        """
        if pages_read < 0:
            raise ValidationError("pages_read must not be negative", details={"pages_read": pages_read})
        if duration is not None and duration < 0:
            raise ValidationError("duration must not be negative", details={"duration": duration})

        session = await self.session_repo.get_for_update(session_id)

        if not session.is_open:
            await self.db.rollback()
            raise ConflictError(
                "Reading session is already closed",
                details={"session_id": str(session_id)},
            )

        end_time = ensure_aware(end_time) if end_time else utcnow()
        if end_time < ensure_aware(session.start_time):
            await self.db.rollback()
            raise ValidationError(
                "end_time must not precede start_time",
                details={"session_id": str(session_id)},
            )

        if duration is None:
            duration = elapsed_seconds(session.start_time, end_time)

        try:
            session = await self.session_repo.close(
                session,
                end_time=end_time,
                pages_read=pages_read,
                duration=duration,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ConstraintViolationError(
                "Session close violated a store constraint",
                details={"session_id": str(session_id)},
            ) from e

        response = SessionResponse.model_validate(session)
        await self._commit("close", session_id=str(session_id))

        logger.info(
            "Reading session closed",
            session_id=str(session_id),
            pages_read=pages_read,
            duration=duration,
        )
        return response

    async def list_sessions(
        self,
        user_id: UUID,
        book_id: UUID | None = None,
    ) -> list[SessionResponse]:
        """Sessions in creation order, open ones included."""
        sessions = await self.session_repo.list_sessions(user_id, book_id)
        return [SessionResponse.model_validate(s) for s in sessions]
