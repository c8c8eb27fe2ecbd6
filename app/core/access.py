"""Row-level ownership checks applied by the data-access layer."""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthorizationError

logger = structlog.get_logger(__name__)


def ensure_owner(caller_id: uuid.UUID, owner_id: uuid.UUID, action: str = "access") -> None:
    """Raise AuthorizationError unless ``caller_id`` owns the row.

    Used for reads and inserts (payload owner) and for updates (stored owner).
    """
    if caller_id != owner_id:
        logger.warning(
            "Ownership check failed",
            action=action,
            caller_id=str(caller_id),
            owner_id=str(owner_id),
        )
        raise AuthorizationError(f"Not allowed to {action} data belonging to another user")


class OwnedRepository:
    """Repository bound to the authenticated caller.

    Every public method checks the caller against the row owner before
    touching the store.
    """

    def __init__(self, db: AsyncSession, caller_id: uuid.UUID):
        self.db = db
        self.caller_id = caller_id

    def _check(self, owner_id: uuid.UUID, action: str = "access") -> None:
        ensure_owner(self.caller_id, owner_id, action)
