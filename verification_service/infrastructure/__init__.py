"""Infrastructure Layer - concrete collaborators behind the core Protocols.

Invariants:
    - Infrastructure never imports from services/
    - Transport/driver failures mapped to core/errors.py types at this layer
"""
