"""Property Maps - static field-name -> attribute lookup for sorting and filtering.

Invariants:
    - Lookups are case-insensitive
    - Unknown names raise UnknownPropertyError, never fall through to getattr
    - Every mapped attribute exists on the record dataclass and the ORM model

Design Decisions:
    - Explicit dicts resolved at import time instead of reflective property paths
"""

from verification_service.core.errors import UnknownPropertyError


class PropertyMap:
    """Resolves public field names (camelCase or snake_case) to attribute names."""

    def __init__(self, entity: str, mapping: dict[str, str]):
        self.entity = entity
        self._map = {k.lower(): v for k, v in mapping.items()}

    def get(self, name: str) -> str:
        try:
            return self._map[name.lower()]
        except KeyError:
            raise UnknownPropertyError(self.entity, name) from None

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._map


VERIFICATION_PROPERTIES = PropertyMap("Verification", {
    "id": "id",
    "userId": "user_id",
    "user_id": "user_id",
    "channel": "channel",
    "destination": "destination",
    "verificationCode": "code",
    "code": "code",
    "verificationPurposeCode": "purpose_code",
    "purpose_code": "purpose_code",
    "status": "status",
    "attemptCount": "attempt_count",
    "attempt_count": "attempt_count",
    "expiresAt": "expires_at",
    "expires_at": "expires_at",
    "verifiedAt": "verified_at",
    "verified_at": "verified_at",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
})

PURPOSE_PROPERTIES = PropertyMap("VerificationPurpose", {
    "id": "id",
    "code": "code",
    "name": "name",
    "description": "description",
    "isActive": "is_active",
    "is_active": "is_active",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
})
