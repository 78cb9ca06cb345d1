"""Tests for the agency directory client and cached directory registry."""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from backend.app.models.offices import OfficeEntry
from backend.app.routing.directory import (
    DirectoryOfficeRegistry,
    DirectoryUnavailableError,
    FoiaDirectoryClient,
    normalize_agency,
)

FALLBACK = OfficeEntry(code="UNROUTED", name="Unrouted", record_types=("other",))

AGENCIES: list[dict[str, Any]] = [
    {
        "abbreviation": "NARA",
        "name": "National Archives and Records Administration",
        "request_form": {"email": "foia@nara.gov"},
        "telephone": "301-837-3642",
    },
    {
        "abbreviation": "FBI",
        "name": "Federal Bureau of Investigation",
        "emails": ["foiparequest@fbi.gov"],
    },
    # No email: dropped
    {"abbreviation": "NOPE", "name": "Unreachable Bureau"},
    # No name: dropped
    {"abbreviation": "ANON", "emails": ["x@example.gov"]},
]


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 6, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.now


def test_normalize_agency_uses_request_form_email() -> None:
    """Test request-form email and abbreviation tag are picked up."""
    office = normalize_agency(AGENCIES[0])

    assert office is not None
    assert office.code == "NARA"
    assert office.email == "foia@nara.gov"
    assert office.phone == "301-837-3642"
    assert office.record_types == ("nara",)


def test_normalize_agency_falls_back_to_name_slug() -> None:
    """Test agencies without abbreviation get a slug of their name."""
    office = normalize_agency({"name": "Office of Special Counsel", "emails": "foia@osc.gov"})

    assert office is not None
    assert office.code == "office_of_special_counsel"
    assert office.record_types == ("office_of_special_counsel",)


@pytest.mark.parametrize(
    "raw",
    [
        AGENCIES[2],
        AGENCIES[3],
        {"name": "  ", "emails": ["a@b"]},
        {"name": "—", "emails": ["a@b.gov"]},
        {"name": "***", "abbreviation": "  ", "emails": ["a@b.gov"]},
    ],
)
def test_normalize_agency_drops_unusable_entries(raw: dict[str, Any]) -> None:
    """Test entries without a name, an email or a usable code are skipped."""
    assert normalize_agency(raw) is None


@pytest.mark.asyncio
async def test_client_parses_jsonapi_payload() -> None:
    """Test the client flattens JSON:API attributes and sends the api key."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [{"attributes": a} for a in AGENCIES]})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    directory = FoiaDirectoryClient(
        "https://api.foia.gov/api/agency_components", api_key="k-123", client=client
    )

    entries = await directory.fetch_directory()

    assert [entry.get("abbreviation") for entry in entries] == ["NARA", "FBI", "NOPE", "ANON"]
    assert seen[0].url.params["api_key"] == "k-123"

    await client.aclose()


@pytest.mark.asyncio
async def test_client_raises_on_http_error() -> None:
    """Test upstream errors surface as DirectoryUnavailableError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    directory = FoiaDirectoryClient("https://api.foia.gov/x", api_key="k", client=client)

    with pytest.raises(DirectoryUnavailableError):
        await directory.fetch_directory()

    await client.aclose()


@pytest.mark.asyncio
async def test_client_rejects_non_list_payload() -> None:
    """Test a payload without an agency list is treated as unavailable."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"oops": True}})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    directory = FoiaDirectoryClient("https://api.foia.gov/x", api_key="k", client=client)

    with pytest.raises(DirectoryUnavailableError):
        await directory.fetch_directory()

    await client.aclose()


@pytest.mark.asyncio
async def test_registry_refresh_normalizes_and_sorts() -> None:
    """Test refresh keeps usable agencies sorted by name and classifies by tag."""
    metrics = MagicMock()

    async def fetch() -> list[dict[str, Any]]:
        return AGENCIES + [AGENCIES[0]]  # duplicate code is dropped

    registry = DirectoryOfficeRegistry(fetch, FALLBACK, metrics=metrics)
    await registry.refresh()

    assert [office.code for office in registry.list_offices()] == ["FBI", "NARA", "UNROUTED"]
    assert registry.classify("nara").email == "foia@nara.gov"
    assert registry.classify("unheard_of").code == "UNROUTED"
    metrics.inc_directory_fetch.assert_called_once_with("ok")


@pytest.mark.asyncio
async def test_registry_serves_fallback_when_directory_down() -> None:
    """Test an unreachable directory leaves only the fallback office."""
    metrics = MagicMock()

    async def fetch() -> list[dict[str, Any]]:
        raise DirectoryUnavailableError("connection refused")

    registry = DirectoryOfficeRegistry(fetch, FALLBACK, metrics=metrics)
    await registry.refresh()

    assert registry.snapshot is None
    assert registry.classify("nara").code == "UNROUTED"
    assert [office.code for office in registry.list_offices()] == ["UNROUTED"]
    metrics.inc_directory_fetch.assert_called_once_with("unavailable")


@pytest.mark.asyncio
async def test_registry_keeps_snapshot_within_ttl_and_after_outage() -> None:
    """Test cached snapshot is reused while fresh and kept when a refetch fails."""
    clock = FakeClock()
    calls = 0
    fail = False

    async def fetch() -> list[dict[str, Any]]:
        nonlocal calls
        calls += 1
        if fail:
            raise DirectoryUnavailableError("timeout")
        return AGENCIES

    registry = DirectoryOfficeRegistry(
        fetch, FALLBACK, ttl_seconds=60, clock=clock, metrics=MagicMock()
    )

    await registry.refresh()
    await registry.refresh()
    assert calls == 1

    clock.now += timedelta(seconds=61)
    fail = True
    await registry.refresh()

    assert calls == 2
    assert registry.classify("fbi").code == "FBI"


@pytest.mark.asyncio
async def test_registry_refresh_skips_symbol_only_names() -> None:
    """Test an entry whose name yields no code is dropped and the rest still load."""

    async def fetch() -> list[dict[str, Any]]:
        return [AGENCIES[1], {"name": "***", "emails": ["stars@example.gov"]}]

    registry = DirectoryOfficeRegistry(fetch, FALLBACK, metrics=MagicMock())
    await registry.refresh()

    assert [office.code for office in registry.list_offices()] == ["FBI", "UNROUTED"]
    assert registry.classify("fbi").email == "foiparequest@fbi.gov"


@pytest.mark.asyncio
async def test_directory_record_types_classify_to_their_office() -> None:
    """Test every listed record type resolves back to the office it names."""

    async def fetch() -> list[dict[str, Any]]:
        return AGENCIES + [{"name": "Office of Special Counsel", "emails": ["foia@osc.gov"]}]

    registry = DirectoryOfficeRegistry(fetch, FALLBACK, metrics=MagicMock())
    await registry.refresh()

    options = registry.list_record_types()

    assert len(options) == 3
    for option in options:
        assert registry.classify(option.value).name == option.office
