"""Domain Types - identity types, enums and constants for the verification domain.

Invariants:
    - VerificationId, PurposeId, UserId wrap UUIDs
    - Only PENDING and VERIFIED are ever written by the lifecycle engine
    - A code is always CODE_LENGTH ASCII digits in [CODE_MIN, CODE_MAX]

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, type-checker support
    - str Enums: serialize to JSON and to DB string columns without converters
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

VerificationId = NewType("VerificationId", UUID)
PurposeId = NewType("PurposeId", UUID)
UserId = NewType("UserId", UUID)


# ─── Constants ───────────────────────────────────────────────────

CODE_LENGTH = 6
CODE_MIN = 100_000
CODE_MAX = 999_999
DEFAULT_EXPIRY_MINUTES = 10

PURPOSE_CODE_MAX_LENGTH = 50
PURPOSE_NAME_MAX_LENGTH = 100
PURPOSE_DESCRIPTION_MAX_LENGTH = 500
PURPOSE_CODE_PATTERN = r"^[A-Z_]+$"


# ─── Enums ───────────────────────────────────────────────────────

class VerificationChannel(str, Enum):
    """Delivery medium for a code."""
    EMAIL = "email"
    SMS = "sms"


class VerificationStatus(str, Enum):
    """Verification lifecycle states - maps to DB `status` column.

    FAILED and EXPIRED are accepted by storage but never written here:
    expiry is derived at read time from expires_at.
    """
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"
    EXPIRED = "expired"
