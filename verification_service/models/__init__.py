"""ORM Models - SQLAlchemy declarative models for verification entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - A Verification references its purpose by code; deleting a referenced
      purpose is restricted at the database level

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from verification_service.models.verification_purpose import VerificationPurpose  # noqa: F401
from verification_service.models.verification import Verification  # noqa: F401
