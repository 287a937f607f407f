"""Lifecycle Enforcement tests - pure PENDING -> VERIFIED rules.

Tests cover:
    - is_usable: status and strict expiry boundary
    - build_pending_record: defaults vs caller-supplied expiry
    - apply_verification: verified copy, refusal of used/expired records
    - remaining_minutes: floor, never negative
    - build_completed_event payload shape
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from verification_service.core.domain_types import (
    VerificationChannel, VerificationStatus,
)
from verification_service.core.enforce_lifecycle import (
    apply_verification,
    as_utc,
    build_completed_event,
    build_pending_record,
    default_expiry,
    is_usable,
    remaining_minutes,
    to_create_request,
    usable_code_filter,
)
from verification_service.core.records import (
    CreateVerificationRequest, SendVerificationRequest, VerificationRecord,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _record(**overrides) -> VerificationRecord:
    fields = {
        "user_id": uuid4(),
        "channel": VerificationChannel.EMAIL,
        "destination": "a@b.com",
        "code": "123456",
        "purpose_code": "REGISTRATION",
        "expires_at": NOW + timedelta(minutes=10),
    }
    fields.update(overrides)
    return VerificationRecord(**fields)


# -- is_usable ----------------------------------------------------------------

def test_pending_unexpired_is_usable():
    assert is_usable(_record(), NOW)


def test_expiry_boundary_is_not_usable():
    assert not is_usable(_record(expires_at=NOW), NOW)


def test_verified_is_not_usable():
    assert not is_usable(_record(status=VerificationStatus.VERIFIED), NOW)


def test_usable_code_filter_fields():
    user_id = uuid4()
    criteria = usable_code_filter("123456", NOW, user_id)
    assert criteria.code == "123456"
    assert criteria.user_id == user_id
    assert criteria.status == VerificationStatus.PENDING
    assert criteria.expires_after == NOW


# -- build_pending_record -----------------------------------------------------

def test_pending_record_defaults_expiry_to_ten_minutes():
    request = CreateVerificationRequest(
        user_id=uuid4(), channel="email", destination="a@b.com",
        purpose_code="REGISTRATION",
    )
    record = build_pending_record(request, "654321", NOW)
    assert record.expires_at == NOW + timedelta(minutes=10)
    assert record.status == VerificationStatus.PENDING
    assert record.attempt_count == 0
    assert record.verified_at is None
    assert record.channel is VerificationChannel.EMAIL


def test_pending_record_keeps_caller_expiry():
    expires_at = NOW + timedelta(hours=1)
    request = CreateVerificationRequest(
        user_id=uuid4(), channel=VerificationChannel.SMS,
        destination="+15551234567", purpose_code="LOGIN", expires_at=expires_at,
    )
    assert build_pending_record(request, "654321", NOW).expires_at == expires_at


def test_pending_record_honours_configured_expiry():
    request = CreateVerificationRequest(
        user_id=uuid4(), channel="email", destination="a@b.com",
        purpose_code="REGISTRATION",
    )
    record = build_pending_record(request, "654321", NOW, expiry_minutes=3)
    assert record.expires_at == default_expiry(NOW, 3)


def test_send_request_becomes_email_create_request():
    send = SendVerificationRequest(
        user_id=uuid4(), destination="a@b.com", purpose_code="REGISTRATION",
    )
    create = to_create_request(send)
    assert create.channel is VerificationChannel.EMAIL
    assert create.destination == "a@b.com"
    assert create.expires_at is None


# -- apply_verification -------------------------------------------------------

def test_apply_verification_returns_verified_copy():
    record = _record()
    verified = apply_verification(record, NOW)

    assert verified.status == VerificationStatus.VERIFIED
    assert verified.verified_at == NOW
    assert verified.updated_at == NOW
    assert verified.attempt_count == 1
    assert verified.id == record.id
    assert record.status == VerificationStatus.PENDING


def test_apply_verification_refuses_verified_record():
    with pytest.raises(ValueError):
        apply_verification(_record(status=VerificationStatus.VERIFIED), NOW)


def test_apply_verification_refuses_expired_record():
    with pytest.raises(ValueError):
        apply_verification(_record(expires_at=NOW - timedelta(seconds=1)), NOW)


# -- remaining_minutes --------------------------------------------------------

def test_remaining_minutes_floors():
    record = _record(expires_at=NOW + timedelta(minutes=9, seconds=59))
    assert remaining_minutes(record, NOW) == 9


def test_remaining_minutes_never_negative():
    record = _record(expires_at=NOW - timedelta(minutes=5))
    assert remaining_minutes(record, NOW) == 0


# -- build_completed_event ----------------------------------------------------

def test_completed_event_payload():
    record = apply_verification(_record(), NOW)
    event = build_completed_event(record, NOW)

    assert event.to_payload() == {
        "VerificationId": str(record.id),
        "UserId": str(record.user_id),
        "Email": "a@b.com",
        "PurposeCode": "REGISTRATION",
        "CompletedAt": NOW.isoformat(),
        "IsSuccessful": True,
    }


# -- timestamps / naive input -------------------------------------------------

def test_pending_record_stamps_created_and_updated():
    request = CreateVerificationRequest(
        user_id=uuid4(), channel="email", destination="a@b.com",
        purpose_code="REGISTRATION",
    )
    record = build_pending_record(request, "654321", NOW)
    assert record.created_at == NOW
    assert record.updated_at == NOW


def test_pending_record_reads_naive_expiry_as_utc():
    request = CreateVerificationRequest(
        user_id=uuid4(), channel="email", destination="a@b.com",
        purpose_code="REGISTRATION", expires_at=datetime(2030, 1, 1, 12, 0),
    )
    record = build_pending_record(request, "654321", NOW)
    assert record.expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert is_usable(record, NOW)


def test_as_utc_keeps_aware_values():
    assert as_utc(NOW) is NOW
    assert as_utc(None) is None
