"""In-memory implementations of repository interfaces."""

import asyncio
import uuid
from collections.abc import Callable
from datetime import datetime

from backend.app.db.repositories import UserRecord
from backend.app.errors import QuotaExceededError
from backend.app.models.offices import OfficeEntry
from backend.app.models.requests import (
    ActivityEntry,
    ActivityType,
    DocumentRecord,
    FoiaRequest,
    RequestFields,
    RequestStatus,
)
from backend.app.utils.clock import month_start, utcnow


class InMemoryUserDirectory:
    """In-memory implementation of UserDirectory."""

    def __init__(self, users: list[UserRecord] | None = None) -> None:
        self._users: dict[uuid.UUID, UserRecord] = {u.user_id: u for u in users or []}

    async def lookup_user(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        return self._users.get(user_id)


class InMemoryRequestStore:
    """In-memory implementation of RequestStore."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._requests: dict[uuid.UUID, FoiaRequest] = {}
        self._activity: list[ActivityEntry] = []
        self._documents: list[DocumentRecord] = []
        # Serializes count-then-insert so concurrent creates cannot overshoot a quota
        self._create_lock = asyncio.Lock()

    def now(self) -> datetime:
        return self._clock()

    async def create_request(
        self,
        user_id: uuid.UUID,
        fields: RequestFields,
        office: OfficeEntry,
        *,
        monthly_limit: int | None = None,
    ) -> uuid.UUID:
        """Create a pending request and its request_created entry."""
        async with self._create_lock:
            if monthly_limit is not None:
                used = await self.count_requests_this_month(user_id)
                if used >= monthly_limit:
                    raise QuotaExceededError(user_id, monthly_limit, used)

            request_id = uuid.uuid4()
            self._requests[request_id] = FoiaRequest(
                id=request_id,
                user_id=user_id,
                office_code=office.code,
                office_name=office.name,
                fields=fields.model_copy(),
                status=RequestStatus.pending,
                created_at=self.now(),
            )
            await self.append_activity(
                request_id, ActivityType.request_created, "FOIA request created"
            )
            return request_id

    async def count_requests_this_month(self, user_id: uuid.UUID) -> int:
        """Count requests created this calendar month."""
        since = month_start(self.now())
        return sum(
            1
            for request in self._requests.values()
            if request.user_id == user_id and request.created_at >= since
        )

    async def update_request_status(
        self, request_id: uuid.UUID, status: RequestStatus, timestamp: datetime
    ) -> bool:
        """Advance a pending request to submitted."""
        record = self._requests.get(request_id)

        if record is None:
            return False

        # Forward only
        if record.status != RequestStatus.pending or status != RequestStatus.submitted:
            return False

        self._requests[request_id] = record.model_copy(
            update={"status": status, "submitted_at": timestamp}
        )
        return True

    async def append_activity(
        self, request_id: uuid.UUID, activity_type: ActivityType, description: str
    ) -> uuid.UUID:
        """Append an audit entry."""
        entry = ActivityEntry(
            id=uuid.uuid4(),
            request_id=request_id,
            activity_type=activity_type,
            description=description,
            created_at=self.now(),
        )
        self._activity.append(entry)
        return entry.id

    async def get_request(self, request_id: uuid.UUID, owner_id: uuid.UUID) -> FoiaRequest | None:
        """Get request by ID."""
        record = self._requests.get(request_id)

        if record is None:
            return None

        # Enforce ownership
        if record.user_id != owner_id:
            return None

        return self._with_document_count(record)

    async def list_activity(self, request_id: uuid.UUID) -> list[ActivityEntry]:
        """List activity entries, newest first."""
        indexed = [
            (entry.created_at, index, entry)
            for index, entry in enumerate(self._activity)
            if entry.request_id == request_id
        ]
        indexed.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return [entry for _, _, entry in indexed]

    async def list_requests(self, owner_id: uuid.UUID) -> list[FoiaRequest]:
        """List a user's requests, newest first."""
        results = [
            self._with_document_count(record)
            for record in self._requests.values()
            if record.user_id == owner_id
        ]
        results.sort(key=lambda r: r.created_at, reverse=True)
        return results

    async def list_documents(self, request_id: uuid.UUID) -> list[DocumentRecord]:
        """List attachment metadata."""
        return [doc for doc in self._documents if doc.request_id == request_id]

    async def list_pending_requests(self, limit: int = 100) -> list[FoiaRequest]:
        """List pending requests, oldest first."""
        pending = [r for r in self._requests.values() if r.status == RequestStatus.pending]
        pending.sort(key=lambda r: r.created_at)
        return [self._with_document_count(r) for r in pending[:limit]]

    def add_document(self, request_id: uuid.UUID, filename: str | None = None) -> uuid.UUID:
        """Attach document metadata (documents arrive outside the request core)."""
        doc = DocumentRecord(
            id=uuid.uuid4(), request_id=request_id, filename=filename, created_at=self.now()
        )
        self._documents.append(doc)
        return doc.id

    def _with_document_count(self, record: FoiaRequest) -> FoiaRequest:
        count = sum(1 for doc in self._documents if doc.request_id == record.id)
        return record.model_copy(update={"documents_count": count})
