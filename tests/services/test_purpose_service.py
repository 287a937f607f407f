"""Purpose Registry - create-if-not-exists by id.

Tests cover:
    - First call persists; second call with the same id returns the original
      unchanged and performs no writes
    - Lookup is by id only: a different id with the same code is a new purpose
    - Validation failures perform no lookups and no writes
    - Created purposes carry created_at and updated_at; listing filters and sorts
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from verification_service.core.errors import (
    UnknownPropertyError, ValidationFailedError,
)
from verification_service.core.records import CreateVerificationPurposeRequest
from verification_service.models.verification_purpose import VerificationPurpose
from verification_service.services.purpose_service import VerificationPurposeService


class InMemoryPurposeStore:
    """PurposeStore without a unique constraint on code; counts calls."""

    def __init__(self):
        self.rows = {}
        self.adds = 0
        self.commits = 0
        self.lookups = 0

    async def add(self, purpose):
        self.rows[purpose.id] = purpose
        self.adds += 1
        return purpose

    async def first_or_default(self, criteria):
        self.lookups += 1
        for row in self.rows.values():
            if criteria.id is not None and row.id != criteria.id:
                continue
            if criteria.code is not None and row.code != criteria.code:
                continue
            return row
        return None

    async def commit(self):
        self.commits += 1
        return self.adds


def _request(**overrides):
    fields = {"code": "PASSWORD_RESET", "name": "Password reset"}
    fields.update(overrides)
    return CreateVerificationPurposeRequest(**fields)


async def test_create_if_not_exists_persists_new_purpose(purpose_service, test_db):
    purpose_id = uuid4()
    created = await purpose_service.create_if_not_exists(
        purpose_id, _request(description="Reset a forgotten password"),
    )

    assert created.id == purpose_id
    assert created.code == "PASSWORD_RESET"
    assert created.is_active is True
    row = await test_db.get(VerificationPurpose, purpose_id)
    assert row.description == "Reset a forgotten password"


async def test_create_if_not_exists_returns_existing_unchanged(
    purpose_service, test_db,
):
    purpose_id = uuid4()
    await purpose_service.create_if_not_exists(purpose_id, _request())

    again = await purpose_service.create_if_not_exists(
        purpose_id, _request(code="OTHER_CODE", name="Something else"),
    )

    assert again.code == "PASSWORD_RESET"
    assert again.name == "Password reset"
    count = (await test_db.execute(
        select(func.count()).select_from(VerificationPurpose),
    )).scalar_one()
    assert count == 1


async def test_same_id_twice_adds_once():
    store = InMemoryPurposeStore()
    service = VerificationPurposeService(store)
    purpose_id = uuid4()

    first = await service.create_if_not_exists(purpose_id, _request())
    second = await service.create_if_not_exists(purpose_id, _request())

    assert first is second
    assert store.adds == 1
    assert store.commits == 1


async def test_different_ids_same_code_are_both_created():
    store = InMemoryPurposeStore()
    service = VerificationPurposeService(store)

    first = await service.create_if_not_exists(uuid4(), _request())
    second = await service.create_if_not_exists(uuid4(), _request())

    assert first.id != second.id
    assert store.adds == 2


async def test_invalid_request_does_not_touch_store():
    store = InMemoryPurposeStore()
    service = VerificationPurposeService(store)

    with pytest.raises(ValidationFailedError) as exc_info:
        await service.create_if_not_exists(
            uuid4(), _request(code="lower-case", name=""),
        )

    assert {e.field for e in exc_info.value.errors} == {"code", "name"}
    assert store.lookups == 0
    assert store.adds == 0
    assert store.commits == 0


async def test_create_stamps_created_and_updated(purpose_service, clock):
    created = await purpose_service.create_if_not_exists(uuid4(), _request())
    assert created.created_at == clock()
    assert created.updated_at == clock()


async def test_list_purposes_filters_and_sorts(purpose_service):
    await purpose_service.create_if_not_exists(
        uuid4(), _request(code="LOGIN", name="Login"),
    )
    await purpose_service.create_if_not_exists(
        uuid4(), _request(code="EMAIL_CHANGE", name="Email"),
    )
    await purpose_service.create_if_not_exists(
        uuid4(), _request(code="LEGACY", name="Legacy", is_active=False),
    )

    active = await purpose_service.list_purposes(is_active=True, sort_by="code")
    last_by_name = await purpose_service.list_purposes(
        sort_by="name", descending=True, limit=1,
    )

    assert [p.code for p in active] == ["EMAIL_CHANGE", "LOGIN"]
    assert last_by_name[0].code == "LOGIN"


async def test_list_purposes_unknown_sort_field(purpose_service):
    with pytest.raises(UnknownPropertyError):
        await purpose_service.list_purposes(sort_by="destination")
