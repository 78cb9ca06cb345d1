"""Monthly submission quota gate."""

import logging
from dataclasses import dataclass

from backend.app.db.repositories import RequestStore, UserRecord
from backend.app.errors import QuotaExceededError
from backend.app.utils.metrics import PrometheusSubmissionMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    """Result of a quota check."""

    allowed: bool
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


class QuotaGate:
    """Enforces the per-user monthly request ceiling.

    A user with limit N may hold at most N requests created in the current
    calendar month (by the store's clock). The check here is advisory; the
    store repeats it atomically with the insert.
    """

    def __init__(
        self, store: RequestStore, metrics: PrometheusSubmissionMetrics | None = None
    ) -> None:
        self._store = store
        self._metrics = metrics or PrometheusSubmissionMetrics()

    async def check_quota(self, user: UserRecord) -> QuotaDecision:
        """Check whether the user may create another request this month."""
        used = await self._store.count_requests_this_month(user.user_id)
        return QuotaDecision(
            allowed=used < user.monthly_request_limit,
            used=used,
            limit=user.monthly_request_limit,
        )

    async def require_quota(self, user: UserRecord) -> QuotaDecision:
        """Check quota and raise when denied.

        Raises:
            QuotaExceededError: If the user is at or over the limit
        """
        decision = await self.check_quota(user)
        if not decision.allowed:
            self._metrics.inc_quota_denial()
            logger.info(
                "Quota denied for user %s (%d/%d)", user.user_id, decision.used, decision.limit
            )
            raise QuotaExceededError(user.user_id, decision.limit, decision.used)
        return decision
