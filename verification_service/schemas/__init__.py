"""Pydantic Schemas - request/response contracts for the HTTP boundary.

Invariants:
    - Schemas convert to core request dataclasses via to_request()
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
