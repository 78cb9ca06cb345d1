"""SQL implementations of repository interfaces."""

import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import ActivityLog, Document, FoiaRequestRow, User
from backend.app.db.queries import query_requests_with_counts
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


def _to_request(row: FoiaRequestRow, documents_count: int = 0) -> FoiaRequest:
    return FoiaRequest(
        id=row.id,
        user_id=row.user_id,
        office_code=row.office_code,
        office_name=row.office_name,
        fields=RequestFields(
            subject=row.subject,
            description=row.description,
            record_type=row.record_type,
            record_title=row.record_title,
            record_author=row.record_author,
            record_recipient=row.record_recipient,
            date_range_start=row.date_range_start,
            date_range_end=row.date_range_end,
            delivery_format=row.delivery_format,
            request_fee_waiver=row.request_fee_waiver,
            waiver_reason=row.waiver_reason,
            requester_phone=row.requester_phone,
            requester_email=row.requester_email,
        ),
        status=RequestStatus(row.status),
        created_at=row.created_at,
        submitted_at=row.submitted_at,
        documents_count=documents_count,
    )


class SqlUserDirectory:
    """SQL implementation of UserDirectory."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def lookup_user(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        result = await self._session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if user is None:
            return None

        return UserRecord(
            user_id=user.id,
            email=user.email,
            monthly_request_limit=user.monthly_request_limit,
        )


class SqlRequestStore:
    """SQL implementation of RequestStore."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow) -> None:
        self._session = session
        self._clock = clock

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
        """Create a pending request and its request_created entry in one transaction."""
        now = self.now()

        if monthly_limit is not None:
            # Lock the owner row so concurrent creates for one user serialize
            await self._session.execute(
                select(User.id).where(User.id == user_id).with_for_update()
            )
            used = await self._count_since(user_id, month_start(now))
            if used >= monthly_limit:
                await self._session.rollback()
                raise QuotaExceededError(user_id, monthly_limit, used)

        request_id = uuid.uuid4()
        row = FoiaRequestRow(
            id=request_id,
            user_id=user_id,
            record_type=fields.record_type,
            office_code=office.code,
            office_name=office.name,
            subject=fields.subject,
            description=fields.description,
            record_title=fields.record_title,
            record_author=fields.record_author,
            record_recipient=fields.record_recipient,
            date_range_start=fields.date_range_start,
            date_range_end=fields.date_range_end,
            delivery_format=fields.delivery_format.value,
            request_fee_waiver=fields.request_fee_waiver,
            waiver_reason=fields.waiver_reason,
            requester_phone=fields.requester_phone,
            requester_email=fields.requester_email,
            status=RequestStatus.pending.value,
            created_at=now,
        )
        self._session.add(row)
        await self._session.flush()

        self._session.add(
            ActivityLog(
                id=uuid.uuid4(),
                request_id=request_id,
                activity_type=ActivityType.request_created.value,
                description="FOIA request created",
                created_at=now,
            )
        )
        await self._session.commit()

        return request_id

    async def count_requests_this_month(self, user_id: uuid.UUID) -> int:
        """Count requests created this calendar month."""
        return await self._count_since(user_id, month_start(self.now()))

    async def _count_since(self, user_id: uuid.UUID, since: datetime) -> int:
        result = await self._session.execute(
            select(func.count(FoiaRequestRow.id)).where(
                FoiaRequestRow.user_id == user_id,
                FoiaRequestRow.created_at >= since,
            )
        )
        return int(result.scalar_one())

    async def update_request_status(
        self, request_id: uuid.UUID, status: RequestStatus, timestamp: datetime
    ) -> bool:
        """Advance a pending request to submitted."""
        if status != RequestStatus.submitted:
            return False

        # Guarded on the current status so the move is forward-only
        result = await self._session.execute(
            update(FoiaRequestRow)
            .where(FoiaRequestRow.id == request_id)
            .where(FoiaRequestRow.status == RequestStatus.pending.value)
            .values(status=status.value, submitted_at=timestamp)
        )
        await self._session.commit()

        return result.rowcount > 0

    async def append_activity(
        self, request_id: uuid.UUID, activity_type: ActivityType, description: str
    ) -> uuid.UUID:
        """Append an audit entry."""
        entry_id = uuid.uuid4()
        self._session.add(
            ActivityLog(
                id=entry_id,
                request_id=request_id,
                activity_type=activity_type.value,
                description=description,
                created_at=self.now(),
            )
        )
        await self._session.commit()

        return entry_id

    async def get_request(self, request_id: uuid.UUID, owner_id: uuid.UUID) -> FoiaRequest | None:
        """Get request by ID."""
        result = await self._session.execute(
            query_requests_with_counts(owner_id).where(FoiaRequestRow.id == request_id)
        )
        row = result.first()

        if row is None:
            return None

        return _to_request(row[0], row[1])

    async def list_activity(self, request_id: uuid.UUID) -> list[ActivityEntry]:
        """List activity entries, newest first."""
        result = await self._session.execute(
            select(ActivityLog)
            .where(ActivityLog.request_id == request_id)
            .order_by(ActivityLog.created_at.desc())
        )

        return [
            ActivityEntry(
                id=entry.id,
                request_id=entry.request_id,
                activity_type=ActivityType(entry.activity_type),
                description=entry.description,
                created_at=entry.created_at,
            )
            for entry in result.scalars().all()
        ]

    async def list_requests(self, owner_id: uuid.UUID) -> list[FoiaRequest]:
        """List a user's requests, newest first."""
        result = await self._session.execute(
            query_requests_with_counts(owner_id).order_by(FoiaRequestRow.created_at.desc())
        )
        return [_to_request(row, count) for row, count in result.all()]

    async def list_documents(self, request_id: uuid.UUID) -> list[DocumentRecord]:
        """List attachment metadata."""
        result = await self._session.execute(
            select(Document).where(Document.request_id == request_id)
        )

        return [
            DocumentRecord(
                id=doc.id,
                request_id=doc.request_id,
                filename=doc.filename,
                created_at=doc.created_at,
            )
            for doc in result.scalars().all()
        ]

    async def list_pending_requests(self, limit: int = 100) -> list[FoiaRequest]:
        """List pending requests, oldest first."""
        result = await self._session.execute(
            query_requests_with_counts()
            .where(FoiaRequestRow.status == RequestStatus.pending.value)
            .order_by(FoiaRequestRow.created_at)
            .limit(limit)
        )
        return [_to_request(row, count) for row, count in result.all()]
