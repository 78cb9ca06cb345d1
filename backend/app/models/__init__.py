"""Models package - re-exports for convenience."""

from backend.app.models.offices import (
    OfficeEntry,
    RecordTypeOption,
    record_type_heading,
    record_type_label,
)
from backend.app.models.requests import (
    ActivityEntry,
    ActivityType,
    DeliveryFormat,
    DocumentRecord,
    FoiaRequest,
    RequestFields,
    RequestStatus,
    SubmissionResult,
)

__all__ = [
    # Offices
    "OfficeEntry",
    "RecordTypeOption",
    "record_type_label",
    "record_type_heading",
    # Requests
    "RequestFields",
    "FoiaRequest",
    "RequestStatus",
    "DeliveryFormat",
    "ActivityType",
    "ActivityEntry",
    "DocumentRecord",
    "SubmissionResult",
]
