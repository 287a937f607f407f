"""Verification Routes - HTTP surface over the lifecycle engine and purpose registry.

Invariants:
    - POST /verify is anonymous and takes only the code
    - GET /by-code returns 404 when absent; GET /valid never 404s
    - GET /valid and GET /by-code require user_id
    - Domain errors propagate to the global handlers (api/error_handlers.py)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from verification_service.api.dependencies import (
    get_purpose_service, get_verification_service,
)
from verification_service.core.domain_types import VerificationStatus
from verification_service.core.errors import ResourceNotFoundError
from verification_service.schemas.verification import (
    CodeValidityResponse,
    CreatePurposeBody,
    CreateVerificationBody,
    PurposeResponse,
    SendVerificationBody,
    VerificationResponse,
    VerifyRequest,
)
from verification_service.services.purpose_service import VerificationPurposeService
from verification_service.services.verification_service import VerificationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/verification", tags=["verification"])


@router.post("/verify", response_model=VerificationResponse)
async def verify(
    body: VerifyRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """Verify a code. Fails with INVALID_OR_EXPIRED_CODE for any unusable code."""
    record = await service.verify(body.code)
    return VerificationResponse.model_validate(record)


@router.post(
    "/send", response_model=VerificationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_verification(
    body: SendVerificationBody,
    service: VerificationService = Depends(get_verification_service),
):
    """Issue an email verification and send it."""
    record = await service.send_verification(body.to_request())
    return VerificationResponse.model_validate(record)


@router.post(
    "", response_model=VerificationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_verification(
    body: CreateVerificationBody,
    service: VerificationService = Depends(get_verification_service),
):
    """Issue a verification without sending anything."""
    record = await service.create_verification(body.to_request())
    return VerificationResponse.model_validate(record)


@router.get("/valid", response_model=CodeValidityResponse)
async def is_code_valid(
    code: str,
    user_id: UUID,
    service: VerificationService = Depends(get_verification_service),
):
    return CodeValidityResponse(valid=await service.is_code_valid(user_id, code))


@router.get("/by-code", response_model=VerificationResponse)
async def get_by_code(
    code: str,
    user_id: UUID,
    service: VerificationService = Depends(get_verification_service),
):
    record = await service.get_by_code(user_id, code)
    if record is None:
        raise ResourceNotFoundError("Verification", "by code")
    return VerificationResponse.model_validate(record)


@router.get("", response_model=list[VerificationResponse])
async def list_verifications(
    user_id: UUID | None = None,
    status_filter: VerificationStatus | None = Query(None, alias="status"),
    sort_by: str = Query("createdAt"),
    descending: bool = Query(True),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: VerificationService = Depends(get_verification_service),
):
    """List verifications; sort_by accepts any mapped field name."""
    records = await service.list_verifications(
        user_id=user_id,
        status=status_filter,
        sort_by=sort_by,
        descending=descending,
        limit=limit,
        offset=offset,
    )
    return [VerificationResponse.model_validate(r) for r in records]


@router.put("/purposes/{purpose_id}", response_model=PurposeResponse)
async def create_purpose_if_not_exists(
    purpose_id: UUID,
    body: CreatePurposeBody,
    service: VerificationPurposeService = Depends(get_purpose_service),
):
    """Create the purpose with this id, or return the one already stored."""
    purpose = await service.create_if_not_exists(purpose_id, body.to_request())
    return PurposeResponse.model_validate(purpose)


@router.get("/purposes", response_model=list[PurposeResponse])
async def list_purposes(
    is_active: bool | None = None,
    sort_by: str = Query("code"),
    descending: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: VerificationPurposeService = Depends(get_purpose_service),
):
    """List purposes; sort_by accepts any mapped purpose field name."""
    purposes = await service.list_purposes(
        is_active=is_active,
        sort_by=sort_by,
        descending=descending,
        limit=limit,
        offset=offset,
    )
    return [PurposeResponse.model_validate(p) for p in purposes]
