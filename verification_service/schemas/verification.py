"""Verification Schemas - Pydantic models for the verification API boundary.

Invariants:
    - Request bodies only coerce types; business rules stay in core validators
      so the service reports them as ValidationFailedError
    - VerifyRequest.code is shape-checked here (6 digits) before reaching the engine
    - Naive datetimes are read as UTC
    - Responses are built from core dataclasses (from_attributes)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from verification_service.core.domain_types import (
    VerificationChannel, VerificationStatus,
)
from verification_service.core.enforce_lifecycle import as_utc
from verification_service.core.records import (
    CreateVerificationPurposeRequest,
    CreateVerificationRequest,
    SendVerificationRequest,
)
from verification_service.core.validate_requests import validate_code_format


class VerifyRequest(BaseModel):
    code: str

    @field_validator("code")
    @classmethod
    def check_code_format(cls, v: str) -> str:
        errors = validate_code_format(v)
        if errors:
            raise ValueError(errors[0].message)
        return v


class SendVerificationBody(BaseModel):
    user_id: UUID | None = None
    destination: str = ""
    purpose_code: str = ""
    expires_at: datetime | None = None

    @field_validator("expires_at")
    @classmethod
    def expires_at_as_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    def to_request(self) -> SendVerificationRequest:
        return SendVerificationRequest(
            user_id=self.user_id,
            destination=self.destination,
            purpose_code=self.purpose_code,
            expires_at=self.expires_at,
        )


class CreateVerificationBody(BaseModel):
    user_id: UUID | None = None
    channel: str = VerificationChannel.EMAIL.value
    destination: str = ""
    purpose_code: str = ""
    expires_at: datetime | None = None

    @field_validator("expires_at")
    @classmethod
    def expires_at_as_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    def to_request(self) -> CreateVerificationRequest:
        return CreateVerificationRequest(
            user_id=self.user_id,
            channel=self.channel,
            destination=self.destination,
            purpose_code=self.purpose_code,
            expires_at=self.expires_at,
        )


class CreatePurposeBody(BaseModel):
    code: str = ""
    name: str = ""
    description: str | None = None
    is_active: bool = True

    def to_request(self) -> CreateVerificationPurposeRequest:
        return CreateVerificationPurposeRequest(
            code=self.code,
            name=self.name,
            description=self.description,
            is_active=self.is_active,
        )


class VerificationResponse(BaseModel):
    """Public view of a verification record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    channel: VerificationChannel
    destination: str
    code: str
    purpose_code: str
    status: VerificationStatus
    attempt_count: int
    expires_at: datetime
    verified_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PurposeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CodeValidityResponse(BaseModel):
    valid: bool
