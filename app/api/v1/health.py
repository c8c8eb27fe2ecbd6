"""Health check endpoint."""

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_db

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    description="""
System health check for monitoring and load balancers.

**Checks:**
- API is running
- Database connectivity

**Status Values:**
- `healthy` - All systems operational
- `degraded` - Database unreachable

**No authentication required.**
    """,
)
async def health_check(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Health check endpoint for monitoring and load balancer probes."""
    health_status = {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {},
    }

    # Check database connectivity
    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        health_status["checks"]["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", error=str(e))
        health_status["status"] = "degraded"
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"

    return health_status
