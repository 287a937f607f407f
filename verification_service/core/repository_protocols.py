"""Boundary Protocols - contracts between the verification core and its collaborators.

Invariants:
    - Core NEVER imports from shell - dependency arrows point inward only
    - Store, validator, notifier and event bus all accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - mark_verified is the only write path for the PENDING -> VERIFIED transition

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no base class
    - Filters as dataclasses instead of callables: every field maps to one
      WHERE clause, so the SQL store never evaluates Python predicates
    - Async in Protocol: implementations do IO; cancellation is asyncio task
      cancellation, no explicit token parameter
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID

from verification_service.core.domain_types import VerificationStatus
from verification_service.core.records import (
    FieldError,
    NotificationMessage,
    VerificationCompletedEvent,
    VerificationPurposeRecord,
    VerificationRecord,
)

RequestT = TypeVar("RequestT", contravariant=True)


@dataclass
class VerificationFilter:
    """Conjunction of optional equality/expiry conditions. None means "any"."""
    id: UUID | None = None
    code: str | None = None
    user_id: UUID | None = None
    status: VerificationStatus | None = None
    expires_after: datetime | None = None


@dataclass
class PurposeFilter:
    id: UUID | None = None
    code: str | None = None
    is_active: bool | None = None


class VerificationStore(Protocol):
    """Contract for verification record persistence - implemented by shell."""
    async def add(self, record: VerificationRecord) -> VerificationRecord: ...
    async def update(self, record: VerificationRecord) -> None: ...
    async def first_or_default(
        self, criteria: VerificationFilter,
    ) -> VerificationRecord | None: ...
    async def mark_verified(
        self, code: str, now: datetime,
    ) -> VerificationRecord | None: ...
    async def list(
        self, criteria: VerificationFilter, sort_by: str, descending: bool,
        limit: int, offset: int,
    ) -> list[VerificationRecord]: ...
    async def commit(self) -> int: ...


class PurposeStore(Protocol):
    """Contract for verification purpose persistence - implemented by shell."""
    async def add(
        self, purpose: VerificationPurposeRecord,
    ) -> VerificationPurposeRecord: ...
    async def first_or_default(
        self, criteria: PurposeFilter,
    ) -> VerificationPurposeRecord | None: ...
    async def list(
        self, criteria: PurposeFilter, sort_by: str, descending: bool,
        limit: int, offset: int,
    ) -> list[VerificationPurposeRecord]: ...
    async def commit(self) -> int: ...


class RequestValidator(Protocol[RequestT]):
    """Field-rule checker. An empty list means the request is valid."""
    def validate(self, request: RequestT, now: datetime) -> list[FieldError]: ...


class Notifier(Protocol):
    """Outbound message transport (email today)."""
    async def send(self, message: NotificationMessage) -> None: ...


class EventBus(Protocol):
    """Outbound fact publisher."""
    async def publish(self, event: VerificationCompletedEvent) -> None: ...
