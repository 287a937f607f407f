"""Verification Service Package - one-time-code issuance and verification.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
