"""Reading progress repository."""

import uuid
from decimal import Decimal
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from app.core.access import OwnedRepository
from app.models.base import utcnow
from app.models.book import Book
from app.models.progress import ReadingProgress

# Dialect-specific INSERT constructs that support ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class ProgressRepository(OwnedRepository):
    """Repository for reading progress operations, scoped to the caller."""

    async def get_progress(self, user_id: UUID, book_id: UUID) -> ReadingProgress | None:
        """Get user's progress for a specific book."""
        self._check(user_id, "read progress of")

        query = select(ReadingProgress).where(
            and_(
                ReadingProgress.user_id == user_id,
                ReadingProgress.book_id == book_id,
            )
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_progress(self, user_id: UUID) -> list[ReadingProgress]:
        """All progress rows of a user, most recently read first."""
        self._check(user_id, "list progress of")

        query = (
            select(ReadingProgress)
            .where(ReadingProgress.user_id == user_id)
            .order_by(ReadingProgress.last_read_at.desc(), ReadingProgress.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def upsert_progress(
        self,
        user_id: UUID,
        book_id: UUID,
        current_page: int,
        total_pages: int,
        progress: Decimal,
    ) -> ReadingProgress:
        """Insert or update the (user, book) row in a single statement.

        Concurrent reports for the same pair resolve inside the store's
        ON CONFLICT handling: the last committed write wins and created_at
        keeps its original value.
        """
        self._check(user_id, "record progress for")

        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Progress upsert is not supported on {dialect}")

        now = utcnow()
        stmt = insert(ReadingProgress).values(
            id=uuid.uuid4(),
            user_id=user_id,
            book_id=book_id,
            current_page=current_page,
            total_pages=total_pages,
            progress=progress,
            last_read_at=now,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "book_id"],
            set_={
                "current_page": stmt.excluded.current_page,
                "total_pages": stmt.excluded.total_pages,
                "progress": stmt.excluded.progress,
                "last_read_at": stmt.excluded.last_read_at,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(ReadingProgress)

        result = await self.db.scalars(stmt, execution_options={"populate_existing": True})
        return result.one()

    async def get_recent_reads(
        self,
        user_id: UUID,
        limit: int = 10,
    ) -> list[tuple[ReadingProgress, Book]]:
        """Get user's recent reads with book info."""
        self._check(user_id, "list progress of")

        query = (
            select(ReadingProgress, Book)
            .join(Book, ReadingProgress.book_id == Book.id)
            .where(ReadingProgress.user_id == user_id)
            .order_by(ReadingProgress.last_read_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]

    async def count_books(self, user_id: UUID) -> tuple[int, int]:
        """Count books started and books completed.

        Returns:
            Tuple of (started, completed)
        """
        self._check(user_id, "read statistics of")

        query = select(
            func.count(ReadingProgress.id).label("started"),
            func.count(ReadingProgress.id)
            .filter(ReadingProgress.progress >= 100)
            .label("completed"),
        ).where(ReadingProgress.user_id == user_id)
        row = (await self.db.execute(query)).one()

        return (row.started or 0, row.completed or 0)
