"""Book repository for database operations."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.book import Book


class BookRepository:
    """Repository for Book catalog lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        title: str,
        author: str | None = None,
        page_count: int | None = None,
    ) -> Book:
        """Create a new book."""
        book = Book(title=title, author=author, page_count=page_count)
        self.db.add(book)
        await self.db.flush()
        await self.db.refresh(book)
        return book

    async def get_by_id(self, book_id: uuid.UUID) -> Book | None:
        """Get book by ID."""
        stmt = select(Book).where(Book.id == book_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, book_id: uuid.UUID) -> bool:
        """Check whether a book row exists."""
        stmt = select(Book.id).where(Book.id == book_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delete(self, book_id: uuid.UUID) -> bool:
        """Delete a book and, by cascade, everything read against it."""
        stmt = delete(Book).where(Book.id == book_id)
        result = await self.db.execute(stmt)
        return result.rowcount > 0
