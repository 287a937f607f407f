"""Core Layer - pure verification logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Every function takes "now" explicitly instead of reading the clock

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
