"""Services Layer - imperative shell around the pure ban core.

Invariants:
    - Services own all IO: SQLAlchemy sessions and the ESI resolver
    - Business decisions delegated to core/ (ban_lifecycle, access_control)
"""
