"""Submission orchestrator - composes a request letter and delivers it.

One attempt per call. A failed attempt leaves the request ``pending`` with
a ``request_failed`` activity entry; retrying is the job of whoever calls
``submit`` again (see ``RequestIntake.retry_pending``).
"""

import asyncio
import logging
import time

from backend.app.db.repositories import RequestStore
from backend.app.delivery.transport import EmailMessage, EmailTransport, SendResult
from backend.app.errors import RequestAlreadySubmittedError
from backend.app.letters.composer import SenderIdentity, compose_letter, subject_line
from backend.app.models.offices import OfficeEntry
from backend.app.models.requests import (
    ActivityType,
    FoiaRequest,
    RequestStatus,
    SubmissionResult,
)
from backend.app.routing.registry import OfficeRegistry
from backend.app.utils.logging import StructuredSubmissionLogger
from backend.app.utils.metrics import PrometheusSubmissionMetrics

logger = logging.getLogger(__name__)


class SubmissionOrchestrator:
    """Routes a stored request to its office and records the outcome."""

    def __init__(
        self,
        registry: OfficeRegistry,
        store: RequestStore,
        transport: EmailTransport,
        sender: SenderIdentity,
        *,
        timeout_ms: int = 10000,
        metrics: PrometheusSubmissionMetrics | None = None,
        attempt_logger: StructuredSubmissionLogger | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            registry: Office registry
            store: Request store
            transport: Email transport
            sender: Identity the letters are sent and signed as
            timeout_ms: Bounded wait on the transport; expiry is a failure
            metrics: Metrics recorder (optional)
            attempt_logger: Structured logger (optional)
        """
        self._registry = registry
        self._store = store
        self._transport = transport
        self._sender = sender
        self._timeout = timeout_ms / 1000
        self._metrics = metrics or PrometheusSubmissionMetrics()
        self._log = attempt_logger or StructuredSubmissionLogger()

    def resolve_office(self, request: FoiaRequest) -> OfficeEntry:
        """Office for a stored request.

        The office recorded at creation wins while the registry still knows
        it; otherwise the record type is classified again.
        """
        return self._registry.get_office(request.office_code) or self._registry.classify(
            request.record_type
        )

    async def submit(
        self, request: FoiaRequest, requester_email: str | None = None
    ) -> SubmissionResult:
        """Compose and send the request letter.

        Args:
            request: Stored request, still pending
            requester_email: Account email used when the request has no override

        Returns:
            SubmissionResult; delivery problems are reported here, never raised

        Raises:
            RequestAlreadySubmittedError: If the request was already delivered
        """
        if request.status != RequestStatus.pending:
            raise RequestAlreadySubmittedError(
                f"Request {request.id} is already {request.status.value}"
            )

        start_time = time.monotonic()

        await self._registry.refresh()
        office = self.resolve_office(request)

        if not office.email:
            detail = f"No deliverable address for office {office.name}"
            self._finish(request, office, "delivery_unavailable", start_time, detail)
            return SubmissionResult(
                status="failure",
                detail=detail,
                reason="delivery_unavailable",
                office_code=office.code,
                office_name=office.name,
            )

        message = EmailMessage(
            sender=self._sender.email,
            to=office.email,
            subject=subject_line(request.fields),
            body=compose_letter(request.fields, office, self._sender, requester_email),
        )
        result = await self._send(message)

        if not result.ok:
            detail = f"Delivery to {office.name} failed: {result.error}"
            await self._store.append_activity(request.id, ActivityType.request_failed, detail)
            self._finish(request, office, "transport_failure", start_time, result.error)
            return SubmissionResult(
                status="failure",
                detail=detail,
                reason="transport_failure",
                office_code=office.code,
                office_name=office.name,
            )

        advanced = await self._store.update_request_status(
            request.id, RequestStatus.submitted, self._store.now()
        )
        detail = f"Request submitted to {office.name}"
        if advanced:
            await self._store.append_activity(request.id, ActivityType.request_submitted, detail)
        else:
            # Another attempt won the race; its entry already records the submission
            logger.warning("Request %s was submitted concurrently", request.id)

        self._finish(request, office, "submitted", start_time)
        return SubmissionResult(
            status="success",
            detail=detail,
            reason="delivered",
            office_code=office.code,
            office_name=office.name,
        )

    async def _send(self, message: EmailMessage) -> SendResult:
        try:
            return await asyncio.wait_for(self._transport.send(message), timeout=self._timeout)
        except TimeoutError:
            return SendResult.failure(f"timed out after {self._timeout:g}s")
        except Exception as e:
            # Transport errors become recorded failures; request creation must not unwind
            logger.exception("Email transport raised")
            return SendResult.failure(f"{type(e).__name__}: {e}")

    def _finish(
        self,
        request: FoiaRequest,
        office: OfficeEntry,
        outcome: str,
        start_time: float,
        error_reason: str | None = None,
    ) -> None:
        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_attempt(outcome, elapsed_ms)
        self._log.log_attempt(request.id, office.code, outcome, elapsed_ms, error_reason)
