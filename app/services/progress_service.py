"""Reading progress service."""

from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import ensure_owner
from app.core.exceptions import ConstraintViolationError, ReferenceNotFoundError, ValidationError
from app.models.base import ensure_aware
from app.repositories.book_repo import BookRepository
from app.repositories.progress_repo import ProgressRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.user_repo import UserRepository
from app.schemas.progress import ProgressResponse, ReadingStats, RecentRead

logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")


def normalize_progress(
    current_page: int | None,
    total_pages: int | None,
    strict: bool = False,
) -> tuple[int, int, Decimal]:
    """Validate a progress report and derive the stored values.

    Returns:
        Tuple of (clamped current_page, total_pages, progress percentage)

    Raises:
        ValidationError: negative page counts, or a zero/missing total
            when ``strict`` is set.
    """
    if current_page is None:
        current_page = 0

    if current_page < 0 or (total_pages is not None and total_pages < 0):
        raise ValidationError(
            "Page counts must not be negative",
            details={"current_page": current_page, "total_pages": total_pages},
        )

    if not total_pages:
        if strict:
            raise ValidationError(
                "total_pages must be a positive integer",
                details={"total_pages": total_pages},
            )
        return 0, 0, Decimal("0.00")

    page = min(current_page, total_pages)
    percent = (Decimal(page) / Decimal(total_pages) * HUNDRED).quantize(
        TWO_PLACES, rounding=ROUND_HALF_UP
    )
    percent = max(Decimal("0.00"), min(percent, Decimal("100.00")))
    return page, total_pages, percent


def calculate_streak(read_dates: list[date], today: date) -> tuple[int, int]:
    """Calculate current and longest reading streak in days.

    ``read_dates`` must be distinct and sorted newest first. Dates after
    ``today`` are ignored.

    Returns:
        Tuple of (current_streak, longest_streak)
    """
    read_dates = [d for d in read_dates if d <= today]
    if not read_dates:
        return (0, 0)

    # Current streak: consecutive days from today backwards
    current_streak = 0
    for i, read_date in enumerate(read_dates):
        if (today - read_date).days == i:
            current_streak += 1
        else:
            break

    longest_streak = 1
    temp_streak = 1
    for prev_date, curr_date in zip(read_dates, read_dates[1:]):
        if (prev_date - curr_date).days == 1:
            temp_streak += 1
            longest_streak = max(longest_streak, temp_streak)
        else:
            temp_streak = 1

    return (current_streak, max(longest_streak, current_streak))


def format_reading_time(seconds: int) -> str:
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


class ProgressService:
    """Service for reading progress operations on behalf of one caller."""

    def __init__(self, db: AsyncSession, caller_id: UUID):
        self.db = db
        self.caller_id = caller_id
        self.progress_repo = ProgressRepository(db, caller_id)
        self.session_repo = SessionRepository(db, caller_id)
        self.book_repo = BookRepository(db)
        self.user_repo = UserRepository(db)

    async def _ensure_references(self, user_id: UUID, book_id: UUID) -> None:
        if not await self.user_repo.exists(user_id):
            raise ReferenceNotFoundError("user", str(user_id))
        if not await self.book_repo.exists(book_id):
            raise ReferenceNotFoundError("book", str(book_id))

    async def report_progress(
        self,
        user_id: UUID,
        book_id: UUID,
        current_page: int | None,
        total_pages: int | None,
        strict: bool = False,
    ) -> ProgressResponse:
        """Record the reader's position, keeping one row per (user, book)."""
        page, total, percent = normalize_progress(current_page, total_pages, strict=strict)

        ensure_owner(self.caller_id, user_id, "record progress for")
        await self._ensure_references(user_id, book_id)

        try:
            progress = await self.progress_repo.upsert_progress(
                user_id=user_id,
                book_id=book_id,
                current_page=page,
                total_pages=total,
                progress=percent,
            )
            response = ProgressResponse.model_validate(progress)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Progress upsert rejected",
                user_id=str(user_id),
                book_id=str(book_id),
                error=str(e.orig),
            )
            raise ConstraintViolationError(
                "Progress write violated a store constraint",
                details={"user_id": str(user_id), "book_id": str(book_id)},
            ) from e

        logger.info(
            "Progress updated",
            user_id=str(user_id),
            book_id=str(book_id),
            current_page=page,
            progress=str(percent),
        )

        return response

    async def get_progress(
        self,
        user_id: UUID,
        book_id: UUID,
    ) -> ProgressResponse | None:
        """Get user's progress for a book."""
        progress = await self.progress_repo.get_progress(user_id, book_id)

        if not progress:
            return None

        return ProgressResponse.model_validate(progress)

    async def list_progress(self, user_id: UUID) -> list[ProgressResponse]:
        """Get all of a user's progress rows."""
        rows = await self.progress_repo.list_progress(user_id)
        return [ProgressResponse.model_validate(row) for row in rows]

    async def get_recent_reads(
        self,
        user_id: UUID,
        limit: int = 10,
    ) -> list[RecentRead]:
        """Get user's recent reads with book info."""
        reads = await self.progress_repo.get_recent_reads(user_id, limit)

        return [
            RecentRead(
                book_id=progress.book_id,
                book_title=book.title,
                book_author=book.author,
                current_page=progress.current_page,
                total_pages=progress.total_pages,
                progress=progress.progress,
                last_read_at=progress.last_read_at,
            )
            for progress, book in reads
        ]

    async def get_stats(self, user_id: UUID) -> ReadingStats:
        """Get user's reading statistics."""
        started, completed = await self.progress_repo.count_books(user_id)
        totals = await self.session_repo.get_totals(user_id)
        start_times = await self.session_repo.get_start_times(user_id)

        read_dates = sorted(
            {ensure_aware(value).astimezone(UTC).date() for value in start_times},
            reverse=True,
        )
        current_streak, longest_streak = calculate_streak(read_dates, datetime.now(UTC).date())

        return ReadingStats(
            total_books_started=started,
            total_books_completed=completed,
            total_sessions=totals["session_count"],
            total_pages_read=totals["total_pages"],
            total_reading_time_seconds=totals["total_time"],
            total_reading_time_formatted=format_reading_time(totals["total_time"]),
            current_streak_days=current_streak,
            longest_streak_days=longest_streak,
        )
