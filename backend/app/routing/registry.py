"""Office registry - maps record-type tags to the office that handles them.

Both backends (the static office table and the cached agency directory)
share ``CatalogRegistry``: an ordered tuple of offices plus a designated
fallback. Classification walks the offices in order and returns the
first owner of the tag, so overlapping tag sets resolve deterministically.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from backend.app.models.offices import OfficeEntry, RecordTypeOption, record_type_label
from backend.app.utils.metrics import PrometheusSubmissionMetrics

logger = logging.getLogger(__name__)


class OfficeRegistry(Protocol):
    """Classifier from record-type tag to target office."""

    async def refresh(self) -> None:
        """Bring the catalog up to date. Never raises."""
        ...

    def classify(self, record_type: str | None) -> OfficeEntry:
        """Resolve a tag to its owning office, or the fallback office."""
        ...

    def get_office(self, code: str) -> OfficeEntry | None:
        """Look up an office by its code."""
        ...

    def list_offices(self) -> list[OfficeEntry]:
        """All offices, sorted by name."""
        ...

    def list_record_types(self) -> list[RecordTypeOption]:
        """Record-type choices sorted by label."""
        ...


class CatalogRegistry:
    """Registry over an in-memory, ordered office catalog."""

    def __init__(
        self,
        offices: Sequence[OfficeEntry],
        fallback: OfficeEntry,
        metrics: PrometheusSubmissionMetrics | None = None,
    ) -> None:
        self._offices: tuple[OfficeEntry, ...] = tuple(offices)
        self._fallback = fallback
        self._metrics = metrics or PrometheusSubmissionMetrics()

    @property
    def fallback(self) -> OfficeEntry:
        return self._fallback

    def _catalog(self) -> tuple[OfficeEntry, ...]:
        return self._offices

    async def refresh(self) -> None:
        return None

    def classify(self, record_type: str | None) -> OfficeEntry:
        tag = (record_type or "").strip().lower()
        if tag:
            for office in self._catalog():
                if office.owns(tag):
                    return office

        logger.info(
            "Record type %r has no owning office, routing to %s",
            record_type,
            self._fallback.code,
        )
        self._metrics.inc_fallback()
        return self._fallback

    def get_office(self, code: str) -> OfficeEntry | None:
        for office in self._catalog():
            if office.code == code:
                return office
        if self._fallback.code == code:
            return self._fallback
        return None

    def list_offices(self) -> list[OfficeEntry]:
        offices = list(self._catalog())
        if all(office.code != self._fallback.code for office in offices):
            offices.append(self._fallback)
        return sorted(offices, key=lambda o: (o.name.casefold(), o.code))

    def list_record_types(self) -> list[RecordTypeOption]:
        options: list[RecordTypeOption] = []
        seen: set[str] = set()

        for office in self._catalog():
            for tag in office.record_types:
                # First owner wins, matching classify()
                if tag in seen:
                    continue
                seen.add(tag)
                options.append(
                    RecordTypeOption(value=tag, label=record_type_label(tag), office=office.name)
                )

        # Stable sort keeps declaration order for equal labels
        options.sort(key=lambda option: option.label.casefold())
        return options


class StaticOfficeRegistry(CatalogRegistry):
    """Registry backed by a hand-authored office table."""

    def __init__(
        self,
        offices: Sequence[OfficeEntry],
        fallback_code: str,
        metrics: PrometheusSubmissionMetrics | None = None,
    ) -> None:
        fallback = next((office for office in offices if office.code == fallback_code), None)
        if fallback is None:
            raise ValueError(f"Fallback office {fallback_code!r} is not in the office table")
        super().__init__(offices, fallback, metrics)
