"""Collaborator wiring for the HTTP layer.

Process-wide collaborators (registry, transport, sender) are built once
from settings; store-backed ones are built per request session.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import get_settings
from backend.app.db.engine import get_session
from backend.app.db.repositories import RequestStore, UserDirectory
from backend.app.db.sql_repositories import SqlRequestStore, SqlUserDirectory
from backend.app.delivery.transport import EmailTransport, ResendEmailTransport
from backend.app.letters.composer import SenderIdentity
from backend.app.models.offices import OfficeEntry
from backend.app.orchestration.intake import RequestIntake
from backend.app.orchestration.quota import QuotaGate
from backend.app.orchestration.submission import SubmissionOrchestrator
from backend.app.routing.directory import DirectoryOfficeRegistry, FoiaDirectoryClient
from backend.app.routing.registry import OfficeRegistry
from backend.app.routing.va_offices import build_va_registry

UNROUTED_OFFICE = OfficeEntry(
    code="UNROUTED",
    name="Unrouted FOIA Request",
    record_types=("other", "unknown", "general"),
    description="No matching agency in the directory",
)


@lru_cache
def get_registry() -> OfficeRegistry:
    """Office registry selected by ``registry_backend``."""
    settings = get_settings()

    if settings.registry_backend == "directory":
        client = FoiaDirectoryClient(
            base_url=settings.foia_directory_url,
            api_key=settings.foia_api_key,
            timeout_ms=settings.directory_timeout_ms,
        )
        return DirectoryOfficeRegistry(
            fetch=client.fetch_directory,
            fallback=UNROUTED_OFFICE,
            ttl_seconds=settings.directory_cache_ttl_seconds,
        )

    return build_va_registry()


@lru_cache
def get_transport() -> EmailTransport:
    """Email transport."""
    settings = get_settings()
    return ResendEmailTransport(
        api_key=settings.resend_api_key,
        base_url=settings.resend_api_url,
        timeout_ms=settings.email_timeout_ms,
    )


@lru_cache
def get_sender() -> SenderIdentity:
    """Identity letters are signed and sent as."""
    settings = get_settings()
    return SenderIdentity(name=settings.sender_name, email=settings.from_email)


def get_store(session: Annotated[AsyncSession, Depends(get_session)]) -> RequestStore:
    return SqlRequestStore(session)


def get_users(session: Annotated[AsyncSession, Depends(get_session)]) -> UserDirectory:
    return SqlUserDirectory(session)


def get_intake(
    users: Annotated[UserDirectory, Depends(get_users)],
    store: Annotated[RequestStore, Depends(get_store)],
    registry: Annotated[OfficeRegistry, Depends(get_registry)],
    transport: Annotated[EmailTransport, Depends(get_transport)],
    sender: Annotated[SenderIdentity, Depends(get_sender)],
) -> RequestIntake:
    """Request intake over the per-request store."""
    orchestrator = SubmissionOrchestrator(
        registry,
        store,
        transport,
        sender,
        timeout_ms=get_settings().email_timeout_ms,
    )
    return RequestIntake(users, store, registry, QuotaGate(store), orchestrator)
