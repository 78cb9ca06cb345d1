"""FOIA request endpoints - create, list, detail and resubmit."""

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from backend.app.api.auth import get_current_context
from backend.app.db.context import RequestContext
from backend.app.db.repositories import RequestStore
from backend.app.dependencies import get_intake, get_store
from backend.app.errors import (
    QuotaExceededError,
    RequestAlreadySubmittedError,
    RequestNotFoundError,
    UnknownUserError,
)
from backend.app.models.requests import (
    ActivityEntry,
    DocumentRecord,
    FoiaRequest,
    RequestFields,
)
from backend.app.orchestration.intake import IntakeOutcome, RequestIntake

router = APIRouter(prefix="/requests", tags=["requests"])


class RequestSummary(RequestFields):
    """Flattened request row for API responses."""

    id: str
    office_code: str
    office_name: str
    status: str
    created_at: datetime
    submitted_at: datetime | None
    documents_count: int

    @classmethod
    def from_request(cls, request: FoiaRequest) -> "RequestSummary":
        return cls(
            **request.fields.model_dump(),
            id=str(request.id),
            office_code=request.office_code,
            office_name=request.office_name,
            status=request.status.value,
            created_at=request.created_at,
            submitted_at=request.submitted_at,
            documents_count=request.documents_count,
        )


class SubmitResponse(BaseModel):
    """Response for POST /requests and POST /requests/{id}/submit."""

    id: str
    status: str
    office_code: str
    office_name: str
    message: str
    warning: str | None = None


class RequestListResponse(BaseModel):
    """Response for GET /requests."""

    requests: list[RequestSummary]


class RequestDetailResponse(BaseModel):
    """Response for GET /requests/{id}."""

    request: RequestSummary
    documents: list[DocumentRecord]
    activity: list[ActivityEntry]


def _submit_response(outcome: IntakeOutcome, message: str) -> SubmitResponse:
    return SubmitResponse(
        id=str(outcome.request.id),
        status=outcome.request.status.value,
        office_code=outcome.request.office_code,
        office_name=outcome.request.office_name,
        message=message,
        warning=outcome.warning,
    )


@router.post("", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    fields: RequestFields,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    intake: Annotated[RequestIntake, Depends(get_intake)],
) -> SubmitResponse:
    """Create a FOIA request and attempt delivery to its office.

    Delivery failures do not fail the call; they come back as ``warning``
    on a created, still-pending request.
    """
    try:
        outcome = await intake.create_request(ctx.user_id, fields)
    except UnknownUserError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    except QuotaExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Monthly request limit reached"
        ) from e

    return _submit_response(outcome, "Request created successfully")


@router.get("", response_model=RequestListResponse)
async def list_requests(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[RequestStore, Depends(get_store)],
) -> RequestListResponse:
    """List the caller's requests, newest first."""
    requests = await store.list_requests(ctx.user_id)
    return RequestListResponse(requests=[RequestSummary.from_request(r) for r in requests])


@router.get("/{request_id}", response_model=RequestDetailResponse)
async def get_request(
    request_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[RequestStore, Depends(get_store)],
) -> RequestDetailResponse:
    """Request detail with documents and activity (newest first)."""
    request = await store.get_request(request_id, ctx.user_id)

    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")

    return RequestDetailResponse(
        request=RequestSummary.from_request(request),
        documents=await store.list_documents(request_id),
        activity=await store.list_activity(request_id),
    )


@router.post("/{request_id}/submit", response_model=SubmitResponse)
async def resubmit_request(
    request_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    intake: Annotated[RequestIntake, Depends(get_intake)],
) -> SubmitResponse:
    """Retry delivery of a pending request."""
    try:
        outcome = await intake.resubmit(ctx.user_id, request_id)
    except UnknownUserError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    except RequestNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Request not found"
        ) from e
    except RequestAlreadySubmittedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    return _submit_response(outcome, "Submission attempted")
