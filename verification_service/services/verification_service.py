"""Verification Lifecycle Engine - issue, look up, validate and verify one-time codes.

Invariants:
    - Validation runs before any store access; ValidationFailedError means no writes
    - create_verification never dispatches; send_verification creates, commits,
      then dispatches (a failed send leaves the PENDING record stored)
    - verify() goes through store.mark_verified (one conditional UPDATE); no
      match raises InvalidOrExpiredCodeError and nothing is written or emitted
    - The completion fact is published only after the VERIFIED state is committed
    - get_by_code ignores status and expiry; is_code_valid and verify do not

Design Decisions:
    - Composition over a generic CRUD base: store, validators, dispatcher and
      emitter injected, the lifecycle operations are plain methods
    - user_id scoping of lookups controlled by scope_lookups_to_user; while it
      is on, a missing or nil user_id fails validation instead of widening the
      lookup to every user
"""

import logging
from uuid import UUID

from verification_service.core.domain_types import (
    DEFAULT_EXPIRY_MINUTES, VerificationStatus,
)
from verification_service.core.enforce_lifecycle import (
    build_pending_record, to_create_request, usable_code_filter,
)
from verification_service.core.errors import (
    InvalidOrExpiredCodeError, ValidationFailedError,
)
from verification_service.core.generate_code import generate_code
from verification_service.core.property_map import VERIFICATION_PROPERTIES
from verification_service.core.records import (
    CreateVerificationRequest, FieldError, SendVerificationRequest,
    VerificationRecord,
)
from verification_service.core.repository_protocols import (
    RequestValidator, VerificationFilter, VerificationStore,
)
from verification_service.core.validate_requests import (
    CreateVerificationRequestValidator,
    SendVerificationRequestValidator,
    is_missing_id,
)
from verification_service.services.clock import Clock, utc_now
from verification_service.services.completion_events import CompletionEventEmitter
from verification_service.services.notification_dispatch import NotificationDispatcher

logger = logging.getLogger(__name__)


class VerificationService:
    """Owns VerificationRecord from issuance to its terminal VERIFIED state."""

    def __init__(
        self,
        store: VerificationStore,
        dispatcher: NotificationDispatcher,
        emitter: CompletionEventEmitter,
        create_validator: RequestValidator[CreateVerificationRequest] | None = None,
        send_validator: RequestValidator[SendVerificationRequest] | None = None,
        clock: Clock = utc_now,
        code_generator=generate_code,
        expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
        scope_lookups_to_user: bool = True,
    ):
        self.store = store
        self.dispatcher = dispatcher
        self.emitter = emitter
        self.create_validator = create_validator or CreateVerificationRequestValidator()
        self.send_validator = send_validator or SendVerificationRequestValidator()
        self.clock = clock
        self.code_generator = code_generator
        self.expiry_minutes = expiry_minutes
        self.scope_lookups_to_user = scope_lookups_to_user

    # ─── Issuance ───────────────────────────────────────────────

    async def create_verification(
        self, request: CreateVerificationRequest,
    ) -> VerificationRecord:
        """Persist a PENDING record with a fresh code. No dispatch."""
        now = self.clock()
        errors = self.create_validator.validate(request, now)
        if errors:
            raise ValidationFailedError(errors)

        record = build_pending_record(
            request, self.code_generator(), now, self.expiry_minutes,
        )
        created = await self.store.add(record)
        await self.store.commit()
        logger.info(
            "Verification created",
            extra={
                "verification_id": created.id,
                "purpose_code": created.purpose_code,
                "channel": created.channel.value,
            },
        )
        return created

    async def send_verification(
        self, request: SendVerificationRequest,
    ) -> VerificationRecord:
        """Create an EMAIL verification, then hand the code to the notifier."""
        errors = self.send_validator.validate(request, self.clock())
        if errors:
            raise ValidationFailedError(errors)

        created = await self.create_verification(to_create_request(request))
        await self.dispatcher.dispatch(created)
        return created

    # ─── Lookup ─────────────────────────────────────────────────

    def _lookup_user(self, user_id: UUID) -> UUID | None:
        """user_id to filter on; a missing id is rejected while scoping is on."""
        if not self.scope_lookups_to_user:
            return None
        if is_missing_id(user_id):
            raise ValidationFailedError([FieldError("user_id", "User ID is required.")])
        return user_id

    async def is_code_valid(self, user_id: UUID, code: str) -> bool:
        """True iff a PENDING, unexpired record carries this code."""
        record = await self.store.first_or_default(
            usable_code_filter(code, self.clock(), self._lookup_user(user_id)),
        )
        return record is not None

    async def get_by_code(
        self, user_id: UUID, code: str,
    ) -> VerificationRecord | None:
        """Inspection lookup: first record with this code, any status or expiry."""
        return await self.store.first_or_default(
            VerificationFilter(code=code, user_id=self._lookup_user(user_id)),
        )

    async def list_verifications(
        self,
        user_id: UUID | None = None,
        status: VerificationStatus | None = None,
        sort_by: str = "createdAt",
        descending: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationRecord]:
        return await self.store.list(
            VerificationFilter(user_id=user_id, status=status),
            sort_by=VERIFICATION_PROPERTIES.get(sort_by),
            descending=descending,
            limit=limit,
            offset=offset,
        )

    # ─── Transition ─────────────────────────────────────────────

    async def verify(self, code: str) -> VerificationRecord:
        """PENDING -> VERIFIED for the record holding this code, then emit."""
        now = self.clock()
        verified = await self.store.mark_verified(code, now)
        if verified is None:
            logger.info("Verify rejected: no usable record for code")
            raise InvalidOrExpiredCodeError()

        await self.store.commit()
        logger.info(
            "Verification completed",
            extra={
                "verification_id": verified.id,
                "purpose_code": verified.purpose_code,
            },
        )
        await self.emitter.emit(verified, self.clock())
        return verified
