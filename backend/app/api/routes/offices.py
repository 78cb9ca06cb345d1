"""Office registry endpoints - GET /record-types and GET /offices."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.app.dependencies import get_registry
from backend.app.models.offices import OfficeEntry, RecordTypeOption
from backend.app.routing.registry import OfficeRegistry

router = APIRouter(tags=["offices"])


class RecordTypeListResponse(BaseModel):
    """Response for GET /record-types."""

    record_types: list[RecordTypeOption]


class OfficeListResponse(BaseModel):
    """Response for GET /offices."""

    offices: list[OfficeEntry]


@router.get("/record-types", response_model=RecordTypeListResponse)
async def list_record_types(
    registry: Annotated[OfficeRegistry, Depends(get_registry)],
) -> RecordTypeListResponse:
    """Record-type choices sorted by label."""
    await registry.refresh()
    return RecordTypeListResponse(record_types=registry.list_record_types())


@router.get("/offices", response_model=OfficeListResponse)
async def list_offices(
    registry: Annotated[OfficeRegistry, Depends(get_registry)],
) -> OfficeListResponse:
    """Offices requests can be routed to, sorted by name."""
    await registry.refresh()
    return OfficeListResponse(offices=registry.list_offices())
