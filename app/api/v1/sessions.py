"""Reading session API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from app.api.v1.deps import CurrentUser, DBSession
from app.config import settings
from app.rate_limiter import limiter
from app.schemas.common import SCOPED_ERROR_RESPONSES
from app.schemas.reading_session import SessionClose, SessionOpen, SessionResponse
from app.services.session_service import SessionService

router = APIRouter(responses=SCOPED_ERROR_RESPONSES)


@router.post(
    "/users/{user_id}/books/{book_id}/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a reading session",
    description="Start a reading session. Leaving earlier sessions open is allowed.",
)
@limiter.limit(settings.rate_limit_writes)
async def open_session(
    request: Request,
    user_id: UUID,
    book_id: UUID,
    current_user: CurrentUser,
    db: DBSession,
    body: SessionOpen | None = None,
) -> SessionResponse:
    service = SessionService(db, current_user.id)
    start_time = body.start_time if body else None
    return await service.open_session(user_id, book_id, start_time)


@router.post(
    "/sessions/{session_id}/close",
    response_model=SessionResponse,
    summary="Close a reading session",
    description="Stamp end time, pages read and duration. A session can be closed once.",
    responses={409: {"description": "Session already closed"}},
)
@limiter.limit(settings.rate_limit_writes)
async def close_session(
    request: Request,
    session_id: UUID,
    body: SessionClose,
    current_user: CurrentUser,
    db: DBSession,
) -> SessionResponse:
    service = SessionService(db, current_user.id)
    return await service.close_session(
        session_id,
        end_time=body.end_time,
        pages_read=body.pages_read,
        duration=body.duration,
    )


@router.get(
    "/users/{user_id}/sessions",
    response_model=list[SessionResponse],
    summary="List reading sessions",
    description="Your sessions in creation order, including ones still open.",
)
async def list_sessions(
    user_id: UUID,
    current_user: CurrentUser,
    db: DBSession,
    book_id: UUID | None = Query(None, description="Only sessions for this book"),
) -> list[SessionResponse]:
    service = SessionService(db, current_user.id)
    return await service.list_sessions(user_id, book_id)
