"""VerificationPurpose ORM - named categories codes are issued for.

Invariants:
    - id is caller-suppliable (create-if-not-exists by exact id)
    - code is unique and is the foreign-key target for verifications
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from verification_service.db.base import Base, UTCDateTime


class VerificationPurpose(Base):
    __tablename__ = "verification_purposes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    code: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True,
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

    verifications: Mapped[list["Verification"]] = relationship(
        "Verification", back_populates="purpose",
        passive_deletes="all",
    )
