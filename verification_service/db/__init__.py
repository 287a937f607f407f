"""Database Infrastructure - SQLAlchemy Base and column types.

Invariants:
    - All models inherit from Base (db/base.py)
    - Sessions come from infrastructure/database.py, never from here
"""
