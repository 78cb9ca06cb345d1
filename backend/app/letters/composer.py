"""FOIA request letter composer.

Pure text assembly: the same request, office and sender always yield the
same letter. Optional blocks are omitted when their fields are absent.
"""

from dataclasses import dataclass

from backend.app.models.offices import OfficeEntry, record_type_heading
from backend.app.models.requests import DeliveryFormat, RequestFields

STATUTE_CITATION = "5 U.S.C. § 552"
FEE_NOTICE_THRESHOLD = "$25.00"

DELIVERY_PHRASES: dict[DeliveryFormat, str] = {
    DeliveryFormat.electronic: "electronic format (PDF)",
    DeliveryFormat.paper: "paper format",
}
DEFAULT_DELIVERY_PHRASE = "either electronic or paper format"


@dataclass(frozen=True)
class SenderIdentity:
    """Service identity that signs letters on the requester's behalf."""

    name: str
    email: str


def _delivery_phrase(delivery_format: DeliveryFormat | str | None) -> str:
    try:
        return DELIVERY_PHRASES.get(DeliveryFormat(delivery_format), DEFAULT_DELIVERY_PHRASE)
    except ValueError:
        return DEFAULT_DELIVERY_PHRASE


def _header(office: OfficeEntry) -> str:
    citation = f"the Freedom of Information Act ({STATUTE_CITATION})"
    if office.regulation:
        citation += f" and the implementing regulations at {office.regulation}"
    return f"To Whom It May Concern:\n\nThis is a request under {citation}."


def _contact_block(fields: RequestFields, requester_email: str | None) -> str | None:
    email = fields.requester_email or requester_email
    lines = []
    if email:
        lines.append(f"Email: {email}")
    if fields.requester_phone:
        lines.append(f"Phone: {fields.requester_phone}")
    if not lines:
        return None
    return "REQUESTER CONTACT INFORMATION:\n" + "\n".join(lines)


def _identification_block(fields: RequestFields) -> str | None:
    lines = []
    if fields.record_title:
        lines.append(f"Title: {fields.record_title}")
    if fields.record_author:
        lines.append(f"Author: {fields.record_author}")
    if fields.record_recipient:
        lines.append(f"Recipient: {fields.record_recipient}")
    if not lines:
        return None
    return "RECORD IDENTIFICATION:\n" + "\n".join(lines)


def _fee_block(fields: RequestFields, office: OfficeEntry) -> str:
    if fields.request_fee_waiver:
        waiver = "FEE WAIVER REQUEST:\nI request a waiver of all fees for this request."
        if fields.waiver_reason:
            waiver += f" {fields.waiver_reason}"
        return waiver

    notice = (
        "FEES:\nPlease notify me before processing this request if the fees are "
        f"expected to exceed {FEE_NOTICE_THRESHOLD}."
    )
    if office.regulation:
        notice += f" I agree to pay fees up to {FEE_NOTICE_THRESHOLD}."
    return notice


def compose_letter(
    fields: RequestFields,
    office: OfficeEntry,
    sender: SenderIdentity,
    requester_email: str | None = None,
) -> str:
    """Compose the plain-text request letter.

    Args:
        fields: Structured request content
        office: Office the letter is addressed to
        sender: Service identity for the signature block
        requester_email: Account email, used when no contact override is set

    Returns:
        Letter body with sections in fixed order
    """
    sections: list[str | None] = [
        _header(office),
        _contact_block(fields, requester_email),
        f"REQUESTED RECORDS:\n\n{fields.description}",
        _identification_block(fields),
    ]

    if fields.date_range_start and fields.date_range_end:
        sections.append(f"DATE RANGE:\n{fields.date_range_start} to {fields.date_range_end}")

    if fields.record_type:
        sections.append(f"RECORD TYPE:\n{record_type_heading(fields.record_type)}")

    sections.append(
        "DELIVERY FORMAT:\nI request that the responsive records be provided in "
        f"{_delivery_phrase(fields.delivery_format)}."
    )
    sections.append(_fee_block(fields, office))
    sections.append(
        "Please acknowledge receipt of this request and provide a tracking number if available."
    )
    sections.append("Thank you for your attention to this matter.")
    sections.append(f"Sincerely,\n\n{sender.name}\nOn behalf of a third party\n{sender.email}")

    return "\n\n".join(section for section in sections if section)


def subject_line(fields: RequestFields) -> str:
    """Email subject for a request letter."""
    return f"FOIA Request: {fields.subject}"
