"""Domain Records - plain data carried between the core and its collaborators.

Invariants:
    - verified_at is not None iff status == VERIFIED
    - attempt_count starts at 0 and only moves on a successful verify
    - VerificationCompletedEvent.to_payload() is the field-exact outbound fact

Design Decisions:
    - dataclasses over ORM objects: core never touches SQLAlchemy sessions
    - Request types are unvalidated data; rules live in core/validate_requests.py
      so the "validator" collaborator can report every failing field at once
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from verification_service.core.domain_types import (
    VerificationChannel, VerificationStatus,
)


# ─── Stored records ──────────────────────────────────────────────

@dataclass
class VerificationRecord:
    """A single issued one-time code bound to a user, destination and purpose."""
    user_id: UUID
    channel: VerificationChannel
    destination: str
    code: str
    purpose_code: str
    expires_at: datetime
    status: VerificationStatus = VerificationStatus.PENDING
    attempt_count: int = 0
    verified_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class VerificationPurposeRecord:
    """A named category a code can be issued for (REGISTRATION, PASSWORD_RESET)."""
    id: UUID
    code: str
    name: str
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ─── Requests ────────────────────────────────────────────────────

@dataclass
class CreateVerificationRequest:
    user_id: UUID | None
    channel: VerificationChannel | str
    destination: str
    purpose_code: str
    expires_at: datetime | None = None


@dataclass
class SendVerificationRequest:
    """Email-only shorthand for CreateVerificationRequest plus dispatch."""
    user_id: UUID | None
    destination: str
    purpose_code: str
    expires_at: datetime | None = None


@dataclass
class CreateVerificationPurposeRequest:
    code: str
    name: str
    description: str | None = None
    is_active: bool = True


@dataclass
class FieldError:
    """One failed validation rule, addressed by request field name."""
    field: str
    message: str


# ─── Outbound messages ───────────────────────────────────────────

@dataclass
class NotificationMessage:
    """What the notifier receives: destination, subject, theme and render model."""
    destination: str
    subject: str
    theme: str
    model: dict[str, object]
    primary_color: str | None = None


@dataclass(frozen=True)
class VerificationCompletedEvent:
    """Fact published after a successful verify transition."""
    verification_id: UUID
    user_id: UUID
    email: str
    purpose_code: str
    completed_at: datetime
    is_successful: bool = True

    def to_payload(self) -> dict:
        return {
            "VerificationId": str(self.verification_id),
            "UserId": str(self.user_id),
            "Email": self.email,
            "PurposeCode": self.purpose_code,
            "CompletedAt": self.completed_at.isoformat(),
            "IsSuccessful": self.is_successful,
        }
