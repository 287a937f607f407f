"""Request Validation - field rules for every request the engine accepts.

Invariants:
    - Validators never raise; they return every failing field as a FieldError
    - An empty list means valid
    - "Future" is strict: expires_at == now is rejected
    - A nil UUID user_id is as missing as None
    - Email shape is syntax-only (no DNS / deliverability lookups)

Design Decisions:
    - One small class per request type, each satisfying RequestValidator[T]:
      the engine receives them by injection and tests can swap in fakes
    - email-validator for address syntax: same library pydantic's EmailStr uses
"""

import re
from datetime import datetime
from uuid import UUID

from email_validator import EmailNotValidError, validate_email

from verification_service.core.domain_types import (
    CODE_LENGTH,
    PURPOSE_CODE_MAX_LENGTH,
    PURPOSE_CODE_PATTERN,
    PURPOSE_DESCRIPTION_MAX_LENGTH,
    PURPOSE_NAME_MAX_LENGTH,
    VerificationChannel,
)
from verification_service.core.enforce_lifecycle import as_utc
from verification_service.core.records import (
    CreateVerificationPurposeRequest,
    CreateVerificationRequest,
    FieldError,
    SendVerificationRequest,
)

_PURPOSE_CODE_RE = re.compile(PURPOSE_CODE_PATTERN)
_DIGITS_RE = re.compile(r"^[0-9]+$")


# ─── Shared rules ────────────────────────────────────────────────

def is_email_shaped(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def is_missing_id(value: UUID | None) -> bool:
    """None and the nil UUID both count as absent."""
    return value is None or value.int == 0


def _check_channel(channel) -> VerificationChannel | None:
    try:
        return VerificationChannel(channel)
    except ValueError:
        return None


def _check_expires_at(expires_at: datetime | None, now: datetime) -> list[FieldError]:
    if expires_at is not None and as_utc(expires_at) <= now:
        return [FieldError("expires_at", "Expiration date must be in the future.")]
    return []


def _check_purpose_code(purpose_code: str | None) -> list[FieldError]:
    if _is_blank(purpose_code) or len(purpose_code) > PURPOSE_CODE_MAX_LENGTH:
        return [FieldError(
            "purpose_code",
            "Purpose code is required and must not exceed 50 characters.",
        )]
    return []


# ─── Validators ──────────────────────────────────────────────────

class CreateVerificationRequestValidator:
    """Rules for issuing a code over any channel."""

    def validate(
        self, request: CreateVerificationRequest, now: datetime,
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        if is_missing_id(request.user_id):
            errors.append(FieldError("user_id", "User ID is required."))

        channel = _check_channel(request.channel)
        if channel is None:
            errors.append(FieldError("channel", "Invalid verification channel."))

        if _is_blank(request.destination):
            errors.append(FieldError("destination", "Destination is required."))
        elif channel == VerificationChannel.EMAIL and not is_email_shaped(
            request.destination,
        ):
            errors.append(FieldError("destination", "Invalid email address format."))

        errors.extend(_check_purpose_code(request.purpose_code))
        errors.extend(_check_expires_at(request.expires_at, now))
        return errors


class SendVerificationRequestValidator:
    """Rules for the email shorthand: destination must always be an address."""

    def validate(
        self, request: SendVerificationRequest, now: datetime,
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        if is_missing_id(request.user_id):
            errors.append(FieldError("user_id", "User ID is required."))

        if _is_blank(request.destination):
            errors.append(FieldError("destination", "Destination is required."))
        elif not is_email_shaped(request.destination):
            errors.append(FieldError("destination", "Invalid email address format."))

        errors.extend(_check_purpose_code(request.purpose_code))
        errors.extend(_check_expires_at(request.expires_at, now))
        return errors


class CreateVerificationPurposeRequestValidator:

    def validate(
        self, request: CreateVerificationPurposeRequest, now: datetime,
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        code = request.code or ""
        if (
            not code
            or len(code) > PURPOSE_CODE_MAX_LENGTH
            or not _PURPOSE_CODE_RE.match(code)
        ):
            errors.append(FieldError(
                "code",
                "Code is required, must not exceed 50 characters, and should "
                "contain only uppercase letters and underscores.",
            ))
        if _is_blank(request.name) or len(request.name) > PURPOSE_NAME_MAX_LENGTH:
            errors.append(FieldError(
                "name", "Name is required and must not exceed 100 characters.",
            ))
        if (
            request.description
            and len(request.description) > PURPOSE_DESCRIPTION_MAX_LENGTH
        ):
            errors.append(FieldError(
                "description", "Description must not exceed 500 characters.",
            ))
        return errors


def validate_code_format(code: str | None) -> list[FieldError]:
    """Shape check for a presented code: exactly 6 digits."""
    if _is_blank(code):
        return [FieldError("code", "Verification code is required.")]
    if len(code) != CODE_LENGTH:
        return [FieldError(
            "code", "Verification code must be exactly 6 characters long.",
        )]
    if not _DIGITS_RE.match(code):
        return [FieldError("code", "Verification code must contain only numbers.")]
    return []
