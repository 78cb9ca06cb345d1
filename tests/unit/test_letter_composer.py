"""Tests for FOIA letter composition."""

import pytest

from backend.app.letters.composer import SenderIdentity, compose_letter, subject_line
from backend.app.models.offices import OfficeEntry
from backend.app.models.requests import RequestFields
from backend.app.routing.va_offices import VA_OFFICES

NCA = next(office for office in VA_OFFICES if office.code == "NCA")
PLAIN_OFFICE = OfficeEntry(code="NARA", name="National Archives", email="foia@nara.gov")


def test_full_letter_sections_in_order(sender: SenderIdentity) -> None:
    """Test a fully populated request renders every section in fixed order."""
    fields = RequestFields(
        subject="Burial records",
        description="Interment records for John Smith.",
        record_type="burial_records",
        record_title="Interment Control Form",
        record_author="NCA Records Office",
        record_recipient="Smith family",
        date_range_start="1968-01-01",
        date_range_end="1968-12-31",
        delivery_format="electronic",
        requester_phone="555-0100",
    )

    letter = compose_letter(fields, NCA, sender, requester_email="veteran@example.com")

    headings = [
        "To Whom It May Concern:",
        "REQUESTER CONTACT INFORMATION:",
        "REQUESTED RECORDS:",
        "RECORD IDENTIFICATION:",
        "DATE RANGE:",
        "RECORD TYPE:",
        "DELIVERY FORMAT:",
        "FEES:",
        "Please acknowledge receipt",
        "Thank you for your attention to this matter.",
        "Sincerely,",
    ]
    positions = [letter.index(heading) for heading in headings]
    assert positions == sorted(positions)

    assert "Email: veteran@example.com\nPhone: 555-0100" in letter
    assert "Title: Interment Control Form" in letter
    assert "DATE RANGE:\n1968-01-01 to 1968-12-31" in letter
    assert "RECORD TYPE:\nBURIAL RECORDS" in letter
    assert "provided in electronic format (PDF)." in letter
    assert letter.endswith(
        "Sincerely,\n\nRequestPing\nOn behalf of a third party\nrequests@requestping.org"
    )


def test_minimal_letter_omits_optional_blocks(sender: SenderIdentity) -> None:
    """Test absent optional fields leave no empty headings behind."""
    fields = RequestFields(subject="Anything", description="Any records.")

    letter = compose_letter(fields, PLAIN_OFFICE, sender)

    for heading in (
        "REQUESTER CONTACT INFORMATION:",
        "RECORD IDENTIFICATION:",
        "DATE RANGE:",
        "RECORD TYPE:",
        "FEE WAIVER REQUEST:",
    ):
        assert heading not in letter
    assert "provided in either electronic or paper format." in letter


def test_date_range_requires_both_ends(sender: SenderIdentity) -> None:
    """Test a half-open date range is not printed."""
    fields = RequestFields(subject="s", description="d", date_range_start="2020-01-01")

    assert "DATE RANGE:" not in compose_letter(fields, PLAIN_OFFICE, sender)


def test_contact_override_wins_over_account_email(sender: SenderIdentity) -> None:
    """Test requester_email on the request replaces the account email."""
    fields = RequestFields(subject="s", description="d", requester_email="alt@example.com")

    letter = compose_letter(fields, PLAIN_OFFICE, sender, requester_email="acct@example.com")

    assert "Email: alt@example.com" in letter
    assert "acct@example.com" not in letter


def test_statute_citation_with_and_without_regulation(sender: SenderIdentity) -> None:
    """Test the regulation is cited only for offices that carry one."""
    fields = RequestFields(subject="s", description="d")

    plain = compose_letter(fields, PLAIN_OFFICE, sender)
    va = compose_letter(fields, NCA, sender)

    assert "Freedom of Information Act (5 U.S.C. § 552)." in plain
    assert (
        "Freedom of Information Act (5 U.S.C. § 552) and the implementing "
        "regulations at 38 C.F.R. § 1.550 et seq." in va
    )


def test_fee_notice_agreement_only_with_regulation(sender: SenderIdentity) -> None:
    """Test the fee agreement clause follows the fuller citation."""
    fields = RequestFields(subject="s", description="d")

    plain = compose_letter(fields, PLAIN_OFFICE, sender)
    va = compose_letter(fields, NCA, sender)

    assert "expected to exceed $25.00." in plain
    assert "I agree to pay fees" not in plain
    assert "I agree to pay fees up to $25.00." in va


def test_fee_waiver_replaces_fee_notice(sender: SenderIdentity) -> None:
    """Test a waiver request prints the waiver with its reason and no fee notice."""
    fields = RequestFields(
        subject="s",
        description="d",
        request_fee_waiver=True,
        waiver_reason="Disclosure is in the public interest.",
    )

    letter = compose_letter(fields, NCA, sender)

    assert (
        "FEE WAIVER REQUEST:\nI request a waiver of all fees for this request. "
        "Disclosure is in the public interest." in letter
    )
    assert "FEES:" not in letter


@pytest.mark.parametrize(
    ("delivery_format", "phrase"),
    [
        ("electronic", "electronic format (PDF)"),
        ("paper", "paper format"),
        ("either", "either electronic or paper format"),
        ("carrier pigeon", "either electronic or paper format"),
    ],
)
def test_delivery_phrases(sender: SenderIdentity, delivery_format: str, phrase: str) -> None:
    """Test each delivery format maps to its phrase; unknown means either."""
    fields = RequestFields(subject="s", description="d", delivery_format=delivery_format)

    assert f"provided in {phrase}." in compose_letter(fields, PLAIN_OFFICE, sender)


def test_letter_is_deterministic(sender: SenderIdentity, burial_fields: RequestFields) -> None:
    """Test the same inputs yield the same letter."""
    assert compose_letter(burial_fields, NCA, sender) == compose_letter(burial_fields, NCA, sender)


def test_subject_line(burial_fields: RequestFields) -> None:
    assert subject_line(burial_fields) == "FOIA Request: Burial records for John Smith"
