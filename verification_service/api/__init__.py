"""API Layer - FastAPI routes, dependency wiring and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes never hold lifecycle logic; they call the services
"""
