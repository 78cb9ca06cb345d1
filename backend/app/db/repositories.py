"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from backend.app.models.offices import OfficeEntry
from backend.app.models.requests import (
    ActivityEntry,
    ActivityType,
    DocumentRecord,
    FoiaRequest,
    RequestFields,
    RequestStatus,
)


@dataclass(frozen=True)
class UserRecord:
    """The slice of a user account the request core reads."""

    user_id: UUID
    email: str
    monthly_request_limit: int


class UserDirectory(Protocol):
    """Identity collaborator."""

    async def lookup_user(self, user_id: UUID) -> UserRecord | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User record or None if not found
        """
        ...


class RequestStore(Protocol):
    """Store for requests and their activity trail."""

    def now(self) -> datetime:
        """Store clock; used for timestamps and the current month."""
        ...

    async def create_request(
        self,
        user_id: UUID,
        fields: RequestFields,
        office: OfficeEntry,
        *,
        monthly_limit: int | None = None,
    ) -> UUID:
        """Create a pending request and its request_created activity entry.

        When ``monthly_limit`` is given the month count and the insert run
        atomically per user.

        Args:
            user_id: Owning user
            fields: Validated request content
            office: Office resolved at creation time
            monthly_limit: Optional quota to enforce atomically

        Returns:
            Request ID

        Raises:
            QuotaExceededError: If the user already has ``monthly_limit``
                requests this month
        """
        ...

    async def count_requests_this_month(self, user_id: UUID) -> int:
        """Count requests the user created in the current calendar month."""
        ...

    async def update_request_status(
        self, request_id: UUID, status: RequestStatus, timestamp: datetime
    ) -> bool:
        """Advance request status.

        Args:
            request_id: Request ID
            status: New status
            timestamp: Submission time to stamp

        Returns:
            True if the status advanced, False if the move would not be forward
        """
        ...

    async def append_activity(
        self, request_id: UUID, activity_type: ActivityType, description: str
    ) -> UUID:
        """Append an audit entry.

        Returns:
            Activity entry ID
        """
        ...

    async def get_request(self, request_id: UUID, owner_id: UUID) -> FoiaRequest | None:
        """Get request by ID, scoped to its owner."""
        ...

    async def list_activity(self, request_id: UUID) -> list[ActivityEntry]:
        """List activity entries, newest first."""
        ...

    async def list_requests(self, owner_id: UUID) -> list[FoiaRequest]:
        """List a user's requests, newest first, with document counts."""
        ...

    async def list_documents(self, request_id: UUID) -> list[DocumentRecord]:
        """List attachment metadata for a request."""
        ...

    async def list_pending_requests(self, limit: int = 100) -> list[FoiaRequest]:
        """List requests still pending, oldest first."""
        ...
