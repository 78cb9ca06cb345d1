"""FOIA request models - user input, stored records and audit entries."""

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class RequestStatus(str, Enum):
    """Request lifecycle status. Only ever advances pending -> submitted."""

    pending = "pending"
    submitted = "submitted"


class DeliveryFormat(str, Enum):
    """Requested format for responsive records."""

    electronic = "electronic"
    paper = "paper"
    either = "either"


class ActivityType(str, Enum):
    """Audit trail entry types."""

    request_created = "request_created"
    request_submitted = "request_submitted"
    request_failed = "request_failed"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class RequestFields(BaseModel):
    """Fields a requester supplies when filing a request."""

    subject: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    record_type: str | None = Field(None, max_length=100, description="Record-type tag")
    record_title: str | None = None
    record_author: str | None = None
    record_recipient: str | None = None
    date_range_start: str | None = None
    date_range_end: str | None = None
    delivery_format: DeliveryFormat = DeliveryFormat.either
    request_fee_waiver: bool = False
    waiver_reason: str | None = None
    requester_phone: str | None = None
    requester_email: str | None = None

    @field_validator("subject", "description", mode="before")
    @classmethod
    def strip_required(cls, v: object) -> object:
        """Reject whitespace-only subject and description."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator(
        "record_type",
        "record_title",
        "record_author",
        "record_recipient",
        "date_range_start",
        "date_range_end",
        "waiver_reason",
        "requester_phone",
        "requester_email",
        mode="before",
    )
    @classmethod
    def optional_blank_is_missing(cls, v: object) -> object:
        """Treat empty optional strings as absent."""
        return _blank_to_none(v)

    @field_validator("delivery_format", mode="before")
    @classmethod
    def unknown_format_is_either(cls, v: object) -> object:
        """Anything other than electronic/paper means either format."""
        if v is None:
            return DeliveryFormat.either
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in (DeliveryFormat.electronic.value, DeliveryFormat.paper.value):
                return DeliveryFormat.either
        return v


class FoiaRequest(BaseModel):
    """A persisted request. Office fields are fixed at creation time."""

    id: UUID
    user_id: UUID
    office_code: str
    office_name: str
    fields: RequestFields
    status: RequestStatus
    created_at: datetime
    submitted_at: datetime | None = None
    documents_count: int = 0

    @property
    def record_type(self) -> str | None:
        return self.fields.record_type

    @property
    def subject(self) -> str:
        return self.fields.subject


class ActivityEntry(BaseModel):
    """Append-only audit record for a request."""

    id: UUID
    request_id: UUID
    activity_type: ActivityType
    description: str
    created_at: datetime


class DocumentRecord(BaseModel):
    """Attachment metadata; listed on request detail only."""

    id: UUID
    request_id: UUID
    filename: str | None = None
    created_at: datetime


class SubmissionResult(BaseModel):
    """Outcome of one delivery attempt."""

    status: Literal["success", "failure"]
    detail: str
    reason: Literal["delivered", "delivery_unavailable", "transport_failure"]
    office_code: str
    office_name: str

    @property
    def ok(self) -> bool:
        return self.status == "success"
