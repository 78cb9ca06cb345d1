"""Structured logging for submission attempts."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)


class StructuredSubmissionLogger:
    """Structured logger for submission attempts."""

    def log_attempt(
        self,
        request_id: UUID,
        office_code: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log a submission attempt with structured data."""
        log_data: dict[str, Any] = {
            "request_id": str(request_id),
            "office": office_code,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"FOIA submission: {request_id} -> {office_code} - {outcome}"

        if outcome == "submitted":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
