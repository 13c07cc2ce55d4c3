"""ORM Models - SQLAlchemy declarative models for the ban store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Ban rows reference Character for issuer and revoker identity

Design Decisions:
    - One file per table
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate run
"""

from app.models.character import Character  # noqa: F401
from app.models.admin import Admin  # noqa: F401
from app.models.ban import Ban  # noqa: F401
