"""Character ORM - display identity for moderators and banned pilots.

Invariants:
    - id is the EVE character id (assigned externally, never autoincremented)
    - name is the last name seen from ESI or the login flow
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Character(Base):
    """An EVE character known to the waitlist."""
    __tablename__ = "character"

    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    corporation_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
