"""Admin ORM - the privileged-role registry (FCs, instructors, leadership).

Invariants:
    - At most one role per character (character_id is the primary key)
    - Read-only from the ban core: only consulted, never written, by ban code
"""

from sqlalchemy import BigInteger, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Admin(Base):
    """A character holding a privileged waitlist role."""
    __tablename__ = "admin"

    character_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("character.id"), primary_key=True,
        autoincrement=False,
    )
    role: Mapped[str] = mapped_column(String(64), nullable=False)
    granted_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    granted_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("character.id"), nullable=True,
    )
