"""Property Map tests - static sort field resolution."""

import pytest

from verification_service.core.errors import UnknownPropertyError
from verification_service.core.property_map import (
    PURPOSE_PROPERTIES, VERIFICATION_PROPERTIES,
)


def test_camel_and_snake_resolve_to_same_attribute():
    assert VERIFICATION_PROPERTIES.get("createdAt") == "created_at"
    assert VERIFICATION_PROPERTIES.get("created_at") == "created_at"


def test_lookup_is_case_insensitive():
    assert VERIFICATION_PROPERTIES.get("EXPIRESAT") == "expires_at"


def test_public_code_name_maps_to_column():
    assert VERIFICATION_PROPERTIES.get("verificationCode") == "code"


def test_unknown_property_raises():
    with pytest.raises(UnknownPropertyError) as exc_info:
        VERIFICATION_PROPERTIES.get("__class__")
    assert exc_info.value.http_status == 400
    assert exc_info.value.code == "UNKNOWN_PROPERTY"


def test_contains():
    assert "status" in VERIFICATION_PROPERTIES
    assert "password" not in VERIFICATION_PROPERTIES


def test_purpose_properties():
    assert PURPOSE_PROPERTIES.get("isActive") == "is_active"
    assert PURPOSE_PROPERTIES.get("CODE") == "code"
    with pytest.raises(UnknownPropertyError):
        PURPOSE_PROPERTIES.get("destination")
