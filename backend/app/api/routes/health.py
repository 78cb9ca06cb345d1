"""Health check endpoints.

- /health: process liveness
- /healthz: DB connectivity plus office registry state
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.engine import get_async_engine
from backend.app.dependencies import get_registry
from backend.app.routing.directory import DirectoryOfficeRegistry
from backend.app.routing.registry import OfficeRegistry
from backend.app.utils.clock import utcnow

router = APIRouter()

logger = logging.getLogger(__name__)


async def check_db() -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        async with AsyncSession(get_async_engine()) as session:
            await session.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        logger.warning("Database health check failed: %s", type(e).__name__)
        return (False, f"error: {type(e).__name__}")


def check_registry(registry: OfficeRegistry) -> str:
    """Describe the registry backend.

    The directory backend degrades to its fallback office, so a missing or
    stale snapshot is reported but never fails the health check.
    """
    if not isinstance(registry, DirectoryOfficeRegistry):
        return "static"

    snapshot = registry.snapshot
    if snapshot is None:
        return "directory: fallback_only"
    if snapshot.is_fresh(utcnow(), registry.ttl_seconds):
        return f"directory: ok ({len(snapshot.offices)} offices)"
    return f"directory: stale ({len(snapshot.offices)} offices)"


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | Response:
    """Component health check.

    Returns:
        200 with component status if the database is reachable
        503 otherwise
    """
    db_ok, db_status = await check_db()

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {
            "db": db_status,
            "registry": check_registry(get_registry()),
        },
    }

    if not db_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
