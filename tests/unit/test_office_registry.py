"""Tests for the office registry and the VA office table."""

from unittest.mock import MagicMock

import pytest

from backend.app.models.offices import OfficeEntry
from backend.app.routing.registry import CatalogRegistry, StaticOfficeRegistry
from backend.app.routing.va_offices import GENERAL_OFFICE_CODE, VA_OFFICES, build_va_registry


@pytest.fixture
def metrics() -> MagicMock:
    return MagicMock()


@pytest.mark.parametrize(
    ("record_type", "expected_code"),
    [
        ("burial_records", "NCA"),
        ("gi_bill", "VBA"),
        ("police_reports", "VHA"),
        ("audits", "OIG"),
        ("other", "GENERAL"),
    ],
)
def test_va_registry_classifies_owned_tags(record_type: str, expected_code: str) -> None:
    """Test each office owns its declared tags."""
    registry = build_va_registry(metrics=MagicMock())

    assert registry.classify(record_type).code == expected_code


def test_classify_is_case_insensitive() -> None:
    """Test tag matching ignores case and surrounding whitespace."""
    registry = build_va_registry(metrics=MagicMock())

    assert registry.classify("  BURIAL_Records ").code == "NCA"


@pytest.mark.parametrize("record_type", [None, "", "   ", "martian_records"])
def test_unknown_tag_falls_back(record_type: str | None, metrics: MagicMock) -> None:
    """Test unknown or missing tags route to the fallback and bump the counter."""
    registry = build_va_registry(metrics=metrics)

    office = registry.classify(record_type)

    assert office.code == GENERAL_OFFICE_CODE
    metrics.inc_fallback.assert_called_once()


def test_owned_tag_does_not_count_as_fallback(metrics: MagicMock) -> None:
    """Test a fallback office that owns the tag is a match, not a fallback."""
    registry = build_va_registry(metrics=metrics)

    assert registry.classify("general").code == GENERAL_OFFICE_CODE
    metrics.inc_fallback.assert_not_called()


def test_first_office_wins_for_overlapping_tags(metrics: MagicMock) -> None:
    """Test overlapping tag sets resolve to the earliest office."""
    first = OfficeEntry(code="A", name="Alpha Office", email="a@x.gov", record_types=("shared",))
    second = OfficeEntry(
        code="B", name="Beta Office", email="b@x.gov", record_types=("shared", "own")
    )
    fallback = OfficeEntry(code="F", name="Fallback", email="f@x.gov")
    registry = CatalogRegistry([first, second], fallback, metrics)

    assert registry.classify("shared").code == "A"
    assert registry.classify("own").code == "B"

    # The shared tag is listed once, under its first owner
    options = {option.value: option.office for option in registry.list_record_types()}
    assert options == {"own": "Beta Office", "shared": "Alpha Office"}


def test_list_record_types_sorted_by_label() -> None:
    """Test record types come back sorted by their human label."""
    registry = build_va_registry(metrics=MagicMock())

    options = registry.list_record_types()
    labels = [option.label for option in options]

    assert labels == sorted(labels, key=str.casefold)
    assert len(options) == sum(len(office.record_types) for office in VA_OFFICES)

    gi_bill = next(option for option in options if option.value == "gi_bill")
    assert gi_bill.label == "Gi Bill"
    assert gi_bill.office == "Veterans Benefits Administration"


def test_list_record_types_is_stable() -> None:
    """Test repeated listing yields the same order."""
    registry = build_va_registry(metrics=MagicMock())

    assert registry.list_record_types() == registry.list_record_types()


def test_list_offices_sorted_by_name() -> None:
    """Test offices are listed by name."""
    registry = build_va_registry(metrics=MagicMock())

    names = [office.name for office in registry.list_offices()]

    assert names == [
        "National Cemetery Administration",
        "Office of Inspector General",
        "VA General FOIA Help",
        "Veterans Benefits Administration",
        "Veterans Health Administration",
    ]


def test_get_office_by_code() -> None:
    """Test lookup by office code."""
    registry = build_va_registry(metrics=MagicMock())

    office = registry.get_office("NCA")
    assert office is not None
    assert office.email == "cemncafoia@va.gov"
    assert registry.get_office("NOPE") is None


def test_static_registry_requires_fallback_in_table() -> None:
    """Test a fallback code missing from the table is rejected."""
    with pytest.raises(ValueError, match="Fallback office"):
        StaticOfficeRegistry(VA_OFFICES, fallback_code="MISSING")


def test_va_offices_cite_regulation() -> None:
    """Test every VA office carries the agency regulation citation."""
    assert all(office.regulation == "38 C.F.R. § 1.550 et seq." for office in VA_OFFICES)


def test_record_types_normalized_to_lowercase() -> None:
    """Test declared tags are stored lower-cased with blanks dropped."""
    office = OfficeEntry(code="X", name="X Office", record_types=["Burial_Records", " ", "GI"])

    assert office.record_types == ("burial_records", "gi")
    assert office.owns("BURIAL_RECORDS")


def test_every_listed_record_type_classifies_to_its_office() -> None:
    """Test each record-type option resolves back to the office it names."""
    registry = build_va_registry(metrics=MagicMock())

    for option in registry.list_record_types():
        assert registry.classify(option.value).name == option.office
