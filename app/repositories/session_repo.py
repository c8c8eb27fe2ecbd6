"""Reading session repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select

from app.core.access import OwnedRepository
from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.reading_session import ReadingSession


class SessionRepository(OwnedRepository):
    """Repository for reading session operations, scoped to the caller."""

    async def create(
        self,
        user_id: UUID,
        book_id: UUID,
        start_time: datetime,
    ) -> ReadingSession:
        """Append a new open session."""
        self._check(user_id, "open a session for")

        now = utcnow()
        session = ReadingSession(
            user_id=user_id,
            book_id=book_id,
            start_time=start_time,
            end_time=None,
            pages_read=0,
            duration=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(session)
        await self.db.flush()
        return session

    async def get_for_update(self, session_id: UUID) -> ReadingSession:
        """Load a session the caller owns, locking the row where supported."""
        query = (
            select(ReadingSession)
            .where(ReadingSession.id == session_id)
            .with_for_update()
        )
        result = await self.db.execute(query)
        session = result.scalar_one_or_none()

        if session is None:
            raise NotFoundError("Reading session", str(session_id))

        # Ownership comes from the stored row, never from the request
        self._check(session.user_id, "modify a session of")
        return session

    async def close(
        self,
        session: ReadingSession,
        end_time: datetime,
        pages_read: int,
        duration: int,
    ) -> ReadingSession:
        """Stamp the closing fields on an owned session."""
        self._check(session.user_id, "modify a session of")

        session.end_time = end_time
        session.pages_read = pages_read
        session.duration = duration
        session.updated_at = utcnow()

        await self.db.flush()
        return session

    async def list_sessions(
        self,
        user_id: UUID,
        book_id: UUID | None = None,
    ) -> list[ReadingSession]:
        """Sessions of a user (optionally for one book) in creation order."""
        self._check(user_id, "list sessions of")

        query = select(ReadingSession).where(ReadingSession.user_id == user_id)
        if book_id is not None:
            query = query.where(ReadingSession.book_id == book_id)
        query = query.order_by(
            ReadingSession.created_at,
            ReadingSession.start_time,
            ReadingSession.id,
        )

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_totals(self, user_id: UUID) -> dict:
        """Aggregate duration, pages and count over a user's sessions."""
        self._check(user_id, "read statistics of")

        query = select(
            func.count(ReadingSession.id).label("session_count"),
            func.coalesce(func.sum(ReadingSession.duration), 0).label("total_time"),
            func.coalesce(func.sum(ReadingSession.pages_read), 0).label("total_pages"),
        ).where(ReadingSession.user_id == user_id)
        row = (await self.db.execute(query)).one()

        return {
            "session_count": row.session_count or 0,
            "total_time": int(row.total_time or 0),
            "total_pages": int(row.total_pages or 0),
        }

    async def get_start_times(self, user_id: UUID) -> list[datetime]:
        """Start times of every session, newest first (for streaks)."""
        self._check(user_id, "read statistics of")

        query = (
            select(ReadingSession.start_time)
            .where(ReadingSession.user_id == user_id)
            .order_by(ReadingSession.start_time.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
