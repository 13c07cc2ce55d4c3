"""Infrastructure Layer - database sessions, ESI client and logging setup.

Invariants:
    - Infrastructure never imports from core/ domain logic beyond errors and types
    - All external failures mapped onto core/errors.py types
"""
