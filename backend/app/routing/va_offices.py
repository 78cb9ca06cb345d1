"""Department of Veterans Affairs FOIA office table.

Order matters: classification returns the first office owning a tag.
"""

from backend.app.models.offices import OfficeEntry
from backend.app.routing.registry import StaticOfficeRegistry
from backend.app.utils.metrics import PrometheusSubmissionMetrics

VA_REGULATION = "38 C.F.R. § 1.550 et seq."

GENERAL_OFFICE_CODE = "GENERAL"

VA_OFFICES: tuple[OfficeEntry, ...] = (
    OfficeEntry(
        code="VBA",
        name="Veterans Benefits Administration",
        email="FOIA.VBACO@va.gov",
        record_types=(
            "benefits",
            "compensation",
            "pension",
            "education",
            "gi_bill",
            "home_loans",
            "life_insurance",
            "fiduciary",
            "vr_e",  # Veteran Readiness & Employment
            "workload_statistics",
            "annual_reports",
        ),
        description="Claims, benefits, education, loans, insurance",
        regulation=VA_REGULATION,
    ),
    OfficeEntry(
        code="VHA",
        name="Veterans Health Administration",
        email="vhafoiahelp@va.gov",
        phone="(833) 880-8500",
        record_types=(
            "police_reports",
            "contracts",
            "budget",
            "financial_records",
            "hr_documents",
            "harassment_prevention",
            "disruptive_behavior",
            "crisis_line",
            "hospital_records",  # non-personal
        ),
        description="Healthcare operations, contracts, HR (not personal medical records)",
        regulation=VA_REGULATION,
    ),
    OfficeEntry(
        code="NCA",
        name="National Cemetery Administration",
        email="cemncafoia@va.gov",
        record_types=(
            "burial_records",
            "cemetery_history",
            "headstone_records",
            "memorial_records",
        ),
        description="Cemetery and burial records",
        regulation=VA_REGULATION,
    ),
    OfficeEntry(
        code="OIG",
        name="Office of Inspector General",
        email="VAOIGFOIA-PA@va.gov",
        record_types=("investigations", "audits", "oig_reports", "inspector_general"),
        description="OIG investigations, audits, reports",
        regulation=VA_REGULATION,
    ),
    OfficeEntry(
        code=GENERAL_OFFICE_CODE,
        name="VA General FOIA Help",
        email="FOIAHelp@va.gov",
        record_types=("other", "unknown", "general"),
        description="General inquiries or unclear record types",
        regulation=VA_REGULATION,
    ),
)


def build_va_registry(metrics: PrometheusSubmissionMetrics | None = None) -> StaticOfficeRegistry:
    """Registry over the VA office table with the general help desk as fallback."""
    return StaticOfficeRegistry(VA_OFFICES, fallback_code=GENERAL_OFFICE_CODE, metrics=metrics)
