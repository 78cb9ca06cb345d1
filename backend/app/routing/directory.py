"""Agency directory backend - offices fetched from the FOIA.gov API and cached.

The directory is an external collaborator and may be down; the registry
keeps serving its last good snapshot (or just the fallback office) when a
refresh fails.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx
from pydantic import ValidationError

from backend.app.models.offices import OfficeEntry
from backend.app.routing.registry import CatalogRegistry
from backend.app.utils.clock import utcnow
from backend.app.utils.metrics import PrometheusSubmissionMetrics

logger = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


class DirectoryUnavailableError(Exception):
    """Agency directory could not be fetched or parsed."""

    pass


class FoiaDirectoryClient:
    """Client for the FOIA.gov agency components endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_ms: int = 8000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize directory client.

        Args:
            base_url: Agency components endpoint
            api_key: FOIA.gov API key
            timeout_ms: Per-fetch timeout
            client: Optional httpx client (for testing with mocks)
        """
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout_ms / 1000
        self._client = client

    async def fetch_directory(self) -> list[dict[str, Any]]:
        """Fetch raw agency entries.

        Returns:
            Raw agency dicts, attribute-flattened

        Raises:
            DirectoryUnavailableError: On network, HTTP or payload errors
        """
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        try:
            response = await client.get(self._base_url, params={"api_key": self._api_key})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DirectoryUnavailableError(f"Agency directory fetch failed: {e}") from e
        finally:
            if close_client:
                await client.aclose()

        # Either a bare list or a JSON:API document {"data": [{"attributes": {...}}]}
        if isinstance(data, dict):
            data = data.get("data")
        if not isinstance(data, list):
            raise DirectoryUnavailableError("Agency directory payload is not a list")

        entries: list[dict[str, Any]] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            attributes = item.get("attributes")
            entries.append(attributes if isinstance(attributes, dict) else item)
        return entries


def _first_email(raw: dict[str, Any]) -> str | None:
    request_form = raw.get("request_form")
    if isinstance(request_form, dict):
        email = request_form.get("email")
        if isinstance(email, str) and email.strip():
            return email.strip()

    emails = raw.get("emails")
    if isinstance(emails, str):
        emails = [emails]
    if isinstance(emails, list):
        for email in emails:
            if isinstance(email, str) and email.strip():
                return email.strip()
    return None


def normalize_agency(raw: dict[str, Any]) -> OfficeEntry | None:
    """Normalize a raw directory entry to an office, or None if unusable.

    An entry needs a non-empty name and at least one contact or
    request-form email. Its record-type tag is the lower-cased
    abbreviation, or a slug of the name when there is none.
    """
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    name = name.strip()

    email = _first_email(raw)
    if email is None:
        return None

    abbreviation = raw.get("abbreviation")
    if isinstance(abbreviation, str) and abbreviation.strip():
        code = abbreviation.strip()
    else:
        code = _NON_SLUG.sub("_", name.lower()).strip("_")
        if not code:
            return None

    phone = raw.get("phone") or raw.get("telephone")
    if isinstance(phone, list):
        phone = phone[0] if phone else None

    description = raw.get("description")
    return OfficeEntry(
        code=code,
        name=name,
        email=email,
        phone=phone if isinstance(phone, str) and phone.strip() else None,
        record_types=(code.lower(),),
        description=description if isinstance(description, str) else "",
    )


@dataclass
class DirectorySnapshot:
    """Normalized directory contents with fetch time."""

    offices: tuple[OfficeEntry, ...]
    fetched_at: datetime

    def is_fresh(self, now: datetime, ttl_seconds: int) -> bool:
        """Check if snapshot is still within its TTL."""
        return (now - self.fetched_at).total_seconds() < ttl_seconds


class DirectoryOfficeRegistry(CatalogRegistry):
    """Registry backed by a cached fetch of the agency directory."""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[dict[str, Any]]]],
        fallback: OfficeEntry,
        ttl_seconds: int = 3600,
        clock: Callable[[], datetime] = utcnow,
        metrics: PrometheusSubmissionMetrics | None = None,
    ) -> None:
        super().__init__((), fallback, metrics)
        self._fetch = fetch
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: DirectorySnapshot | None = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> DirectorySnapshot | None:
        return self._snapshot

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def _catalog(self) -> tuple[OfficeEntry, ...]:
        if self._snapshot is None:
            return ()
        return self._snapshot.offices

    async def refresh(self) -> None:
        """Refetch the directory when the snapshot is missing or stale."""
        async with self._lock:
            if self._snapshot is not None and self._snapshot.is_fresh(
                self._clock(), self._ttl_seconds
            ):
                return

            try:
                raw_entries = await self._fetch()
            except DirectoryUnavailableError as e:
                self._metrics.inc_directory_fetch("unavailable")
                logger.warning(
                    "Agency directory unavailable, serving %s",
                    "cached snapshot" if self._snapshot else "fallback office only",
                    extra={"structured": {"error_reason": str(e)}},
                )
                return

            offices: list[OfficeEntry] = []
            seen: set[str] = set()
            dropped = 0
            for raw in raw_entries:
                try:
                    office = normalize_agency(raw)
                except ValidationError as e:
                    logger.debug("Dropping malformed directory entry: %s", e.errors()[0]["msg"])
                    office = None
                if office is None or office.code in seen:
                    dropped += 1
                    continue
                seen.add(office.code)
                offices.append(office)

            offices.sort(key=lambda o: (o.name.casefold(), o.code))
            self._snapshot = DirectorySnapshot(offices=tuple(offices), fetched_at=self._clock())
            self._metrics.inc_directory_fetch("ok")
            logger.info("Agency directory refreshed: %d offices, %d dropped", len(offices), dropped)
