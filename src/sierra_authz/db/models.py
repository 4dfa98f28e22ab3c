"""
sierra_authz.db.models

Persistence schema for the decision audit trail.

Responsibilities:
- Define `DecisionRecord`: one append-only row per evaluated request, holding the
  internal reason code that is never returned to end users.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from sierra_authz.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class DecisionRecord(Base):
    __tablename__ = "decision_records"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    request_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    # Principal snapshot ("" subject for unauthenticated callers).
    subject_id: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    company_id: Mapped[str] = mapped_column(String(256), nullable=False)
    authenticated: Mapped[bool] = mapped_column(Boolean, nullable=False)

    operation: Mapped[str] = mapped_column(String(16), nullable=False)
    collection: Mapped[str] = mapped_column(String(256), nullable=False)
    document_id: Mapped[str] = mapped_column(String(1500), nullable=False)

    allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, index=True)
    reason: Mapped[str] = mapped_column(String(128), nullable=False)
    # missing_fields/type_errors when schema validation failed.
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )

    __table_args__ = (Index("ix_decision_records_collection_created", "collection", "created_at"),)
