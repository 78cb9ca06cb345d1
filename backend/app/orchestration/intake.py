"""Request intake - quota, classification, persistence, then submission."""

import logging
from dataclasses import dataclass
from uuid import UUID

from backend.app.db.repositories import RequestStore, UserDirectory, UserRecord
from backend.app.errors import (
    RequestAlreadySubmittedError,
    RequestNotFoundError,
    UnknownUserError,
)
from backend.app.models.requests import FoiaRequest, RequestFields, SubmissionResult
from backend.app.orchestration.quota import QuotaGate
from backend.app.orchestration.submission import SubmissionOrchestrator
from backend.app.routing.registry import OfficeRegistry

logger = logging.getLogger(__name__)


@dataclass
class IntakeOutcome:
    """A stored request and the result of its delivery attempt."""

    request: FoiaRequest
    submission: SubmissionResult

    @property
    def warning(self) -> str | None:
        """Delivery warning for the caller; the request exists either way."""
        return None if self.submission.ok else self.submission.detail


class RequestIntake:
    """Creates requests and drives their submission.

    Only validation and quota failures abort creation. Once the pending
    request is stored, delivery problems come back as a warning.
    """

    def __init__(
        self,
        users: UserDirectory,
        store: RequestStore,
        registry: OfficeRegistry,
        quota: QuotaGate,
        orchestrator: SubmissionOrchestrator,
    ) -> None:
        self._users = users
        self._store = store
        self._registry = registry
        self._quota = quota
        self._orchestrator = orchestrator

    async def _require_user(self, user_id: UUID) -> UserRecord:
        user = await self._users.lookup_user(user_id)
        if user is None:
            raise UnknownUserError(f"Unknown user {user_id}")
        return user

    async def create_request(self, user_id: UUID, fields: RequestFields) -> IntakeOutcome:
        """File a new request.

        Args:
            user_id: Requesting user
            fields: Validated request content

        Returns:
            IntakeOutcome with the stored request (status after the attempt)

        Raises:
            UnknownUserError: If the user does not exist
            QuotaExceededError: If the monthly limit is reached
        """
        user = await self._require_user(user_id)
        await self._quota.require_quota(user)

        await self._registry.refresh()
        office = self._registry.classify(fields.record_type)

        request_id = await self._store.create_request(
            user.user_id, fields, office, monthly_limit=user.monthly_request_limit
        )
        logger.info("Created request %s routed to %s", request_id, office.code)

        return await self._submit(user, request_id)

    async def resubmit(self, user_id: UUID, request_id: UUID) -> IntakeOutcome:
        """Retry delivery of a pending request.

        Raises:
            UnknownUserError: If the user does not exist
            RequestNotFoundError: If the request is missing or not the user's
            RequestAlreadySubmittedError: If it was already delivered
        """
        user = await self._require_user(user_id)
        return await self._submit(user, request_id)

    async def retry_pending(self, limit: int = 100) -> list[IntakeOutcome]:
        """Re-attempt every pending request, oldest first (for a scheduler)."""
        outcomes: list[IntakeOutcome] = []

        for request in await self._store.list_pending_requests(limit):
            user = await self._users.lookup_user(request.user_id)
            if user is None:
                logger.warning("Skipping request %s with unknown owner", request.id)
                continue
            try:
                outcomes.append(await self._submit(user, request.id))
            except RequestAlreadySubmittedError:
                continue

        return outcomes

    async def _submit(self, user: UserRecord, request_id: UUID) -> IntakeOutcome:
        request = await self._store.get_request(request_id, user.user_id)
        if request is None:
            raise RequestNotFoundError(f"Request {request_id} not found")

        submission = await self._orchestrator.submit(request, requester_email=user.email)

        refreshed = await self._store.get_request(request_id, user.user_id)
        return IntakeOutcome(request=refreshed or request, submission=submission)
