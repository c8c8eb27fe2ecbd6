"""Shared API dependencies for authentication."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError
from app.core.security import verify_access_token
from app.db.session import get_db
from app.models.user import User
from app.repositories.user_repo import UserRepository

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    bearer: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Resolve the caller from the identity provider's bearer token.

    The token's ``sub`` claim is trusted once the signature checks out;
    the user must also exist locally and be active.
    """
    if bearer:
        payload = verify_access_token(bearer.credentials)
        if payload:
            user_id = payload.get("sub")
            if user_id:
                try:
                    user = await UserRepository(db).get_by_id(user_id)
                except ValueError:
                    user = None
                if user and user.is_active:
                    return user

    raise UnauthorizedError("Invalid or missing authentication credentials")


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DBSession = Annotated[AsyncSession, Depends(get_db)]
