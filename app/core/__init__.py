"""Core utilities package."""

from app.core.access import OwnedRepository, ensure_owner
from app.core.exceptions import (
    APIError,
    AuthorizationError,
    ConflictError,
    ConstraintViolationError,
    NotFoundError,
    ReferenceNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.core.security import create_access_token, verify_access_token

__all__ = [
    "create_access_token",
    "verify_access_token",
    "ensure_owner",
    "OwnedRepository",
    "APIError",
    "AuthorizationError",
    "ConflictError",
    "ConstraintViolationError",
    "NotFoundError",
    "ReferenceNotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
