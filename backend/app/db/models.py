"""SQLAlchemy ORM models for users, requests, activity and documents."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from backend.app.utils.clock import utcnow


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class User(Base):
    """User table - owned by the identity service; read for quota and contact email."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    monthly_request_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    requests: Mapped[list["FoiaRequestRow"]] = relationship(
        "FoiaRequestRow", back_populates="user"
    )


class FoiaRequestRow(Base):
    """Request table - one row per FOIA request."""

    __tablename__ = "requests"
    __table_args__ = (
        Index("idx_requests_user_created", "user_id", "created_at"),
        Index("idx_requests_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    # Directory-era routing columns, kept for rows created before office routing
    agency: Mapped[str | None] = mapped_column(Text, nullable=True)
    agency_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    record_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    office_code: Mapped[str] = mapped_column(Text, nullable=False)
    office_name: Mapped[str] = mapped_column(Text, nullable=False)

    subject: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    record_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    record_author: Mapped[str | None] = mapped_column(Text, nullable=True)
    record_recipient: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_range_start: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_range_end: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_format: Mapped[str] = mapped_column(Text, nullable=False, default="either")
    request_fee_waiver: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    waiver_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    requester_phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    requester_email: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="requests")


class ActivityLog(Base):
    """Activity log table - append-only audit trail per request."""

    __tablename__ = "activity_log"
    __table_args__ = (Index("idx_activity_request_created", "request_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("requests.id"), nullable=False
    )
    activity_type: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class Document(Base):
    """Document table - attachment metadata received for a request."""

    __tablename__ = "documents"
    __table_args__ = (Index("idx_documents_request", "request_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("requests.id"), nullable=False
    )
    filename: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
