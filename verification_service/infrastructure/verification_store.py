"""SQL Stores - SQLAlchemy implementations of VerificationStore and PurposeStore.

Invariants:
    - Stores share the request's AsyncSession; nothing is visible to other
      sessions until commit()
    - mark_verified() is a single conditional UPDATE guarded by
      status == pending AND expires_at > now: of two concurrent verifies of the
      same code, exactly one sees rowcount == 1
    - Rows leave the store as core dataclasses, never as ORM objects

Design Decisions:
    - Filters translated field-by-field into WHERE clauses (no Python predicates)
    - Reads use populate_existing: the conditional UPDATE bypasses the identity
      map, so previously loaded rows are refreshed on the next select
    - commit() returns the number of writes staged since the last commit
    - add() keeps caller-stamped created_at/updated_at; both default to the
      insert time otherwise
"""

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from verification_service.core.domain_types import (
    VerificationChannel, VerificationStatus,
)
from verification_service.core.enforce_lifecycle import (
    apply_verification, usable_code_filter,
)
from verification_service.core.records import (
    VerificationPurposeRecord, VerificationRecord,
)
from verification_service.core.repository_protocols import (
    PurposeFilter, VerificationFilter,
)
from verification_service.models.verification import Verification
from verification_service.models.verification_purpose import VerificationPurpose

logger = logging.getLogger(__name__)


def _to_record(row: Verification) -> VerificationRecord:
    return VerificationRecord(
        id=row.id,
        user_id=row.user_id,
        channel=VerificationChannel(row.channel),
        destination=row.destination,
        code=row.code,
        purpose_code=row.purpose_code,
        status=VerificationStatus(row.status),
        attempt_count=row.attempt_count,
        expires_at=row.expires_at,
        verified_at=row.verified_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_purpose(row: VerificationPurpose) -> VerificationPurposeRecord:
    return VerificationPurposeRecord(
        id=row.id,
        code=row.code,
        name=row.name,
        description=row.description,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _timestamps(record) -> dict:
    """Caller-stamped times; absent ones fall back to the column defaults."""
    stamps = {}
    if record.created_at is not None:
        stamps["created_at"] = record.created_at
    if record.updated_at is not None:
        stamps["updated_at"] = record.updated_at
    return stamps


def _purpose_conditions(criteria: PurposeFilter) -> list:
    conditions = []
    if criteria.id is not None:
        conditions.append(VerificationPurpose.id == criteria.id)
    if criteria.code is not None:
        conditions.append(VerificationPurpose.code == criteria.code)
    if criteria.is_active is not None:
        conditions.append(VerificationPurpose.is_active == criteria.is_active)
    return conditions


def _verification_conditions(criteria: VerificationFilter) -> list:
    conditions = []
    if criteria.id is not None:
        conditions.append(Verification.id == criteria.id)
    if criteria.code is not None:
        conditions.append(Verification.code == criteria.code)
    if criteria.user_id is not None:
        conditions.append(Verification.user_id == criteria.user_id)
    if criteria.status is not None:
        conditions.append(Verification.status == criteria.status.value)
    if criteria.expires_after is not None:
        conditions.append(Verification.expires_at > criteria.expires_after)
    return conditions


class SqlVerificationStore:
    """VerificationStore over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._staged = 0

    async def add(self, record: VerificationRecord) -> VerificationRecord:
        row = Verification(
            id=record.id,
            user_id=record.user_id,
            channel=VerificationChannel(record.channel).value,
            destination=record.destination,
            code=record.code,
            purpose_code=record.purpose_code,
            status=record.status.value,
            attempt_count=record.attempt_count,
            expires_at=record.expires_at,
            verified_at=record.verified_at,
            **_timestamps(record),
        )
        self.db.add(row)
        await self.db.flush()
        self._staged += 1
        return _to_record(row)

    async def update(self, record: VerificationRecord) -> None:
        row = await self.db.get(Verification, record.id)
        if row is None:
            raise LookupError(f"verification {record.id} does not exist")
        row.channel = VerificationChannel(record.channel).value
        row.destination = record.destination
        row.purpose_code = record.purpose_code
        row.status = record.status.value
        row.attempt_count = record.attempt_count
        row.expires_at = record.expires_at
        row.verified_at = record.verified_at
        row.updated_at = record.updated_at
        await self.db.flush()
        self._staged += 1

    async def first_or_default(
        self, criteria: VerificationFilter,
    ) -> VerificationRecord | None:
        result = await self.db.execute(
            select(Verification)
            .where(*_verification_conditions(criteria))
            .limit(1)
            .execution_options(populate_existing=True),
        )
        row = result.scalars().first()
        return _to_record(row) if row else None

    async def mark_verified(
        self, code: str, now: datetime,
    ) -> VerificationRecord | None:
        """Transition the first usable record with this code, or return None."""
        candidate = await self.first_or_default(usable_code_filter(code, now))
        if candidate is None:
            return None
        verified = apply_verification(candidate, now)

        result = await self.db.execute(
            update(Verification)
            .where(
                Verification.id == candidate.id,
                Verification.status == VerificationStatus.PENDING.value,
                Verification.expires_at > now,
            )
            .values(
                status=verified.status.value,
                verified_at=verified.verified_at,
                attempt_count=Verification.attempt_count + 1,
                updated_at=verified.updated_at,
            )
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            logger.warning(
                "Verification changed state before it could be verified",
                extra={"verification_id": candidate.id},
            )
            return None
        self._staged += 1
        return verified

    async def list(
        self,
        criteria: VerificationFilter,
        sort_by: str = "created_at",
        descending: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationRecord]:
        column = getattr(Verification, sort_by)
        result = await self.db.execute(
            select(Verification)
            .where(*_verification_conditions(criteria))
            .order_by(column.desc() if descending else column.asc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True),
        )
        return [_to_record(row) for row in result.scalars().all()]

    async def commit(self) -> int:
        await self.db.commit()
        staged, self._staged = self._staged, 0
        return staged


class SqlPurposeStore:
    """PurposeStore over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._staged = 0

    async def add(
        self, purpose: VerificationPurposeRecord,
    ) -> VerificationPurposeRecord:
        row = VerificationPurpose(
            id=purpose.id,
            code=purpose.code,
            name=purpose.name,
            description=purpose.description,
            is_active=purpose.is_active,
            **_timestamps(purpose),
        )
        self.db.add(row)
        await self.db.flush()
        self._staged += 1
        return _to_purpose(row)

    async def first_or_default(
        self, criteria: PurposeFilter,
    ) -> VerificationPurposeRecord | None:
        result = await self.db.execute(
            select(VerificationPurpose)
            .where(*_purpose_conditions(criteria))
            .limit(1),
        )
        row = result.scalars().first()
        return _to_purpose(row) if row else None

    async def list(
        self,
        criteria: PurposeFilter,
        sort_by: str = "code",
        descending: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationPurposeRecord]:
        column = getattr(VerificationPurpose, sort_by)
        result = await self.db.execute(
            select(VerificationPurpose)
            .where(*_purpose_conditions(criteria))
            .order_by(column.desc() if descending else column.asc())
            .limit(limit)
            .offset(offset),
        )
        return [_to_purpose(row) for row in result.scalars().all()]

    async def commit(self) -> int:
        await self.db.commit()
        staged, self._staged = self._staged, 0
        return staged
