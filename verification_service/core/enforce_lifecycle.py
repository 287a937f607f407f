"""Lifecycle Enforcement - pure rules for the PENDING -> VERIFIED state machine.

Invariants:
    - A record is usable iff status == PENDING and expires_at > now (strict)
    - apply_verification() is the only way a record becomes VERIFIED
    - A VERIFIED record is terminal: apply_verification() refuses it
    - expires_at defaults to now + DEFAULT_EXPIRY_MINUTES
    - Naive datetimes are read as UTC, the same rule UTCDateTime applies on bind

Design Decisions:
    - Expiry is a read-time predicate, no sweeper rewrites status
    - Pure functions take `now` so tests never race the clock
"""

import math
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from uuid import UUID

from verification_service.core.domain_types import (
    DEFAULT_EXPIRY_MINUTES, VerificationChannel, VerificationStatus,
)
from verification_service.core.records import (
    CreateVerificationRequest,
    SendVerificationRequest,
    VerificationCompletedEvent,
    VerificationRecord,
)
from verification_service.core.repository_protocols import VerificationFilter


def as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def default_expiry(now: datetime, minutes: int = DEFAULT_EXPIRY_MINUTES) -> datetime:
    return now + timedelta(minutes=minutes)


def is_usable(record: VerificationRecord, now: datetime) -> bool:
    """True when the record can still be verified."""
    return record.status == VerificationStatus.PENDING and record.expires_at > now


def usable_code_filter(
    code: str, now: datetime, user_id: UUID | None = None,
) -> VerificationFilter:
    """Filter matching records a presented code may validate against."""
    return VerificationFilter(
        code=code,
        user_id=user_id,
        status=VerificationStatus.PENDING,
        expires_after=now,
    )


def build_pending_record(
    request: CreateVerificationRequest,
    code: str,
    now: datetime,
    expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
) -> VerificationRecord:
    """Fresh PENDING record; caller's expires_at wins over the default."""
    return VerificationRecord(
        user_id=request.user_id,
        channel=VerificationChannel(request.channel),
        destination=request.destination,
        code=code,
        purpose_code=request.purpose_code,
        status=VerificationStatus.PENDING,
        attempt_count=0,
        expires_at=as_utc(request.expires_at) or default_expiry(now, expiry_minutes),
        created_at=now,
        updated_at=now,
    )


def to_create_request(request: SendVerificationRequest) -> CreateVerificationRequest:
    """Send requests always go out over email."""
    return CreateVerificationRequest(
        user_id=request.user_id,
        channel=VerificationChannel.EMAIL,
        destination=request.destination,
        purpose_code=request.purpose_code,
        expires_at=request.expires_at,
    )


def apply_verification(record: VerificationRecord, now: datetime) -> VerificationRecord:
    """Return the VERIFIED copy of a usable record.

    Raises ValueError when the record is not usable at `now`; callers holding
    a record from usable_code_filter() never hit this.
    """
    if not is_usable(record, now):
        raise ValueError(f"verification {record.id} is not pending or has expired")
    return replace(
        record,
        status=VerificationStatus.VERIFIED,
        verified_at=now,
        attempt_count=record.attempt_count + 1,
        updated_at=now,
    )


def build_completed_event(
    record: VerificationRecord, completed_at: datetime,
) -> VerificationCompletedEvent:
    return VerificationCompletedEvent(
        verification_id=record.id,
        user_id=record.user_id,
        email=record.destination,
        purpose_code=record.purpose_code,
        completed_at=completed_at,
        is_successful=True,
    )


def remaining_minutes(record: VerificationRecord, now: datetime) -> int:
    """Whole minutes left before expiry, floored, never negative."""
    seconds = (record.expires_at - now).total_seconds()
    return max(0, math.floor(seconds / 60))
