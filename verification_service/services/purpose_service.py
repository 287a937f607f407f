"""Purpose Registry - idempotent creation of verification purposes.

Invariants:
    - create_if_not_exists looks up by the exact given id, never by code
    - An existing purpose is returned unchanged; the request's fields are ignored
    - The fetch path performs zero writes (no add, no commit)
    - list_purposes sorts only by names in PURPOSE_PROPERTIES
"""

import logging
from uuid import UUID

from verification_service.core.errors import ValidationFailedError
from verification_service.core.property_map import PURPOSE_PROPERTIES
from verification_service.core.records import (
    CreateVerificationPurposeRequest, VerificationPurposeRecord,
)
from verification_service.core.repository_protocols import (
    PurposeFilter, PurposeStore, RequestValidator,
)
from verification_service.core.validate_requests import (
    CreateVerificationPurposeRequestValidator,
)
from verification_service.services.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class VerificationPurposeService:

    def __init__(
        self,
        store: PurposeStore,
        create_validator: RequestValidator[CreateVerificationPurposeRequest] | None = None,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.create_validator = (
            create_validator or CreateVerificationPurposeRequestValidator()
        )
        self.clock = clock

    async def create_if_not_exists(
        self, purpose_id: UUID, request: CreateVerificationPurposeRequest,
    ) -> VerificationPurposeRecord:
        """Create-or-fetch by id. Not an upsert."""
        now = self.clock()
        errors = self.create_validator.validate(request, now)
        if errors:
            raise ValidationFailedError(errors)

        existing = await self.store.first_or_default(PurposeFilter(id=purpose_id))
        if existing is not None:
            return existing

        created = await self.store.add(VerificationPurposeRecord(
            id=purpose_id,
            code=request.code,
            name=request.name,
            description=request.description,
            is_active=request.is_active,
            created_at=now,
            updated_at=now,
        ))
        await self.store.commit()
        logger.info(
            f"Verification purpose {created.code} created",
            extra={"purpose_code": created.code},
        )
        return created

    async def list_purposes(
        self,
        is_active: bool | None = None,
        sort_by: str = "code",
        descending: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationPurposeRecord]:
        return await self.store.list(
            PurposeFilter(is_active=is_active),
            sort_by=PURPOSE_PROPERTIES.get(sort_by),
            descending=descending,
            limit=limit,
            offset=offset,
        )
