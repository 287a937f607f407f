"""Verification ORM - persists one issued one-time code.

Invariants:
    - status transitions only pending -> verified (see core/enforce_lifecycle.py)
    - verified_at is set iff status == verified
    - purpose_code FK to verification_purposes.code with ON DELETE RESTRICT

Design Decisions:
    - channel/status stored as strings: readable rows, enum lives in core
    - Composite index (user_id, purpose_code, status) for per-user lookups;
      code and expires_at indexed for the usable-code predicate
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from verification_service.core.domain_types import VerificationStatus
from verification_service.db.base import Base, UTCDateTime


class Verification(Base):
    __tablename__ = "verifications"
    __table_args__ = (
        Index(
            "ix_verifications_user_purpose_status",
            "user_id", "purpose_code", "status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    purpose_code: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("verification_purposes.code", ondelete="RESTRICT"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value,
    )
    attempt_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, index=True,
    )
    verified_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
    )

    purpose: Mapped["VerificationPurpose"] = relationship(
        "VerificationPurpose", back_populates="verifications",
    )
