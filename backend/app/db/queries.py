"""Ownership-safe query helpers."""

from uuid import UUID

from sqlalchemy import Select, func, select

from backend.app.db.models import Document, FoiaRequestRow


def documents_count_subquery():
    """Per-request document counts, for outer-joining onto request queries."""
    return (
        select(Document.request_id, func.count(Document.id).label("documents_count"))
        .group_by(Document.request_id)
        .subquery()
    )


def query_requests_with_counts(owner_id: UUID | None = None) -> Select:
    """Select (request row, documents_count) pairs.

    Args:
        owner_id: When given, restrict to requests owned by this user

    Returns:
        Select statement yielding (FoiaRequestRow, int)
    """
    counts = documents_count_subquery()
    stmt = select(
        FoiaRequestRow, func.coalesce(counts.c.documents_count, 0)
    ).outerjoin(counts, counts.c.request_id == FoiaRequestRow.id)

    if owner_id is not None:
        stmt = stmt.where(FoiaRequestRow.user_id == owner_id)
    return stmt
