"""Code Generator - uniformly random 6-digit one-time codes.

Invariants:
    - Result is exactly CODE_LENGTH ASCII digits, value in [CODE_MIN, CODE_MAX]
    - No uniqueness guarantee; lookups filter by code + status + expiry

Design Decisions:
    - secrets.SystemRandom: OS entropy, shared process-wide, no seeding
"""

import random
import secrets

from verification_service.core.domain_types import CODE_MAX, CODE_MIN

_rng = secrets.SystemRandom()


def generate_code(rng: random.Random | None = None) -> str:
    """Return a random code in [100000, 999999] as a string."""
    return str((rng or _rng).randint(CODE_MIN, CODE_MAX))
