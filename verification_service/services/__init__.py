"""Services Layer - async orchestration of the verification core.

Invariants:
    - Services own commits; stores only stage writes
    - Collaborators (store, notifier, event bus, clock) arrive by injection

Design Decisions:
    - One service per aggregate: verifications and purposes
"""
