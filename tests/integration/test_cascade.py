"""Cascade deletion of progress and sessions with their user or book."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.book import Book
from app.models.progress import ReadingProgress
from app.models.reading_session import ReadingSession
from app.models.user import User
from app.repositories.book_repo import BookRepository
from app.repositories.user_repo import UserRepository
from app.services.progress_service import ProgressService
from app.services.session_service import SessionService


async def count_rows(db: AsyncSession, model, **filters) -> int:
    query = select(func.count(model.id))
    for column, value in filters.items():
        query = query.where(getattr(model, column) == value)
    return (await db.execute(query)).scalar_one()


async def seed_reading(db: AsyncSession, user: User, book: Book) -> None:
    await ProgressService(db, user.id).report_progress(user.id, book.id, 30, 200)
    sessions = SessionService(db, user.id)
    opened = await sessions.open_session(user.id, book.id)
    await sessions.close_session(opened.id, pages_read=5)
    await sessions.open_session(user.id, book.id)


async def test_deleting_user_removes_their_rows(
    db_session: AsyncSession, test_user: User, other_user: User, test_book: Book
):
    await seed_reading(db_session, test_user, test_book)
    await seed_reading(db_session, other_user, test_book)

    assert await UserRepository(db_session).delete(test_user.id)
    await db_session.commit()

    assert await count_rows(db_session, ReadingProgress, user_id=test_user.id) == 0
    assert await count_rows(db_session, ReadingSession, user_id=test_user.id) == 0

    # Other readers are untouched
    assert await count_rows(db_session, ReadingProgress, user_id=other_user.id) == 1
    assert await count_rows(db_session, ReadingSession, user_id=other_user.id) == 2


async def test_deleting_book_removes_rows_for_it(
    db_session: AsyncSession, test_user: User, test_book: Book, second_book: Book
):
    await seed_reading(db_session, test_user, test_book)
    await seed_reading(db_session, test_user, second_book)

    assert await BookRepository(db_session).delete(test_book.id)
    await db_session.commit()

    assert await count_rows(db_session, ReadingProgress, book_id=test_book.id) == 0
    assert await count_rows(db_session, ReadingSession, book_id=test_book.id) == 0
    assert await count_rows(db_session, ReadingProgress, book_id=second_book.id) == 1


async def test_deleting_missing_user(db_session: AsyncSession, test_user: User):
    repo = UserRepository(db_session)

    assert await repo.delete(test_user.id)
    assert not await repo.delete(test_user.id)
