"""Re-attempt delivery of pending requests.

Meant to run from cron or a job scheduler:

    python -m scripts.retry_pending --limit 50
"""

import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import get_settings
from backend.app.db.engine import get_async_engine
from backend.app.db.sql_repositories import SqlRequestStore, SqlUserDirectory
from backend.app.dependencies import get_registry, get_sender, get_transport
from backend.app.orchestration.intake import RequestIntake
from backend.app.orchestration.quota import QuotaGate
from backend.app.orchestration.submission import SubmissionOrchestrator

logger = logging.getLogger("scripts.retry_pending")


async def retry_pending(limit: int) -> int:
    """Retry up to ``limit`` pending requests; returns how many were delivered."""
    registry = get_registry()

    async with AsyncSession(get_async_engine()) as session:
        store = SqlRequestStore(session)
        orchestrator = SubmissionOrchestrator(
            registry,
            store,
            get_transport(),
            get_sender(),
            timeout_ms=get_settings().email_timeout_ms,
        )
        intake = RequestIntake(
            SqlUserDirectory(session), store, registry, QuotaGate(store), orchestrator
        )
        outcomes = await intake.retry_pending(limit)

    delivered = sum(1 for outcome in outcomes if outcome.submission.ok)
    logger.info("Retried %d pending requests, %d delivered", len(outcomes), delivered)
    return delivered


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--limit", type=int, default=100)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(retry_pending(args.limit))


if __name__ == "__main__":
    main()
