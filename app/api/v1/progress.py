"""Reading progress API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from app.api.v1.deps import CurrentUser, DBSession
from app.config import settings
from app.core.exceptions import NotFoundError
from app.rate_limiter import limiter
from app.schemas.common import SCOPED_ERROR_RESPONSES
from app.schemas.progress import ProgressReport, ProgressResponse, ReadingStats, RecentRead
from app.services.progress_service import ProgressService

router = APIRouter(responses=SCOPED_ERROR_RESPONSES)


@router.get(
    "/users/{user_id}/progress",
    response_model=list[ProgressResponse],
    summary="List reading progress",
    description="List every book you have progress on, most recently read first.",
)
async def list_progress(
    user_id: UUID,
    current_user: CurrentUser,
    db: DBSession,
) -> list[ProgressResponse]:
    service = ProgressService(db, current_user.id)
    return await service.list_progress(user_id)


@router.get(
    "/users/{user_id}/progress/recent",
    response_model=list[RecentRead],
    summary="Get recent reads",
    description="Get your recently read books with progress.",
)
async def get_recent_reads(
    user_id: UUID,
    current_user: CurrentUser,
    db: DBSession,
    limit: int = Query(10, ge=1, le=50, description="Number of recent reads to return"),
) -> list[RecentRead]:
    """Get user's recent reads."""
    service = ProgressService(db, current_user.id)
    return await service.get_recent_reads(user_id, limit)


@router.get(
    "/users/{user_id}/progress/stats",
    response_model=ReadingStats,
    summary="Get reading statistics",
    description="Books started and completed, session totals and daily streaks.",
)
async def get_reading_stats(
    user_id: UUID,
    current_user: CurrentUser,
    db: DBSession,
) -> ReadingStats:
    """Get user's reading statistics."""
    service = ProgressService(db, current_user.id)
    return await service.get_stats(user_id)


@router.get(
    "/users/{user_id}/books/{book_id}/progress",
    response_model=ProgressResponse,
    summary="Get reading progress",
    description="Get your reading progress for a specific book.",
)
async def get_progress(
    user_id: UUID,
    book_id: UUID,
    current_user: CurrentUser,
    db: DBSession,
) -> ProgressResponse:
    """Get user's progress for a book."""
    service = ProgressService(db, current_user.id)
    progress = await service.get_progress(user_id, book_id)
    if progress is None:
        raise NotFoundError("Reading progress")
    return progress


@router.put(
    "/users/{user_id}/books/{book_id}/progress",
    response_model=ProgressResponse,
    summary="Report reading progress",
    description="""
Record the page you are on. Creates the progress row on the first report
and updates it afterwards; there is never more than one row per book.

`current_page` beyond `total_pages` is clamped, so progress tops out at 100.00.
    """,
)
@limiter.limit(settings.rate_limit_writes)
async def report_progress(
    request: Request,
    user_id: UUID,
    book_id: UUID,
    report: ProgressReport,
    current_user: CurrentUser,
    db: DBSession,
) -> ProgressResponse:
    """Update user's reading progress."""
    service = ProgressService(db, current_user.id)
    return await service.report_progress(
        user_id,
        book_id,
        current_page=report.current_page,
        total_pages=report.total_pages,
        strict=True,
    )
