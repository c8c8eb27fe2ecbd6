"""User repository for database operations."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str | uuid.UUID) -> User | None:
        """Get user by ID."""
        if isinstance(user_id, str):
            user_id = uuid.UUID(user_id)

        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, user_id: uuid.UUID) -> bool:
        """Check whether a user row exists."""
        stmt = select(User.id).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        email: str,
        display_name: str,
        user_id: uuid.UUID | None = None,
    ) -> User:
        """Mirror an identity-provider account locally."""
        user = User(
            id=user_id or uuid.uuid4(),
            email=email.lower(),
            display_name=display_name,
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def delete(self, user_id: uuid.UUID) -> bool:
        """Delete a user. Progress and sessions go with it via ON DELETE CASCADE."""
        stmt = delete(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.rowcount > 0
