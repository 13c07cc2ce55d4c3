"""Ban ORM - one row per ban ever issued; rows are never deleted.

Invariants:
    - entity_type/entity_id/entity_name are written once at creation
    - issued_at/issued_by are re-stamped on every amendment
    - revoked_at is dual-purpose: scheduled expiry OR manual revocation instant
    - revoked_by is set only by the revoke operation
    - All timestamps are unix seconds (UTC)

Design Decisions:
    - BIGINT epoch seconds over DateTime: the API speaks epoch seconds and the
      activity filter is a plain integer comparison
    - Composite index on (entity_type, entity_id): history and current-ban lookups
"""

from sqlalchemy import BigInteger, Integer, String, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Ban(Base):
    """A ban on a character, corporation or alliance."""
    __tablename__ = "ban"
    __table_args__ = (
        Index("ix_ban_entity", "entity_type", "entity_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    entity_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    entity_type: Mapped[str] = mapped_column(String(16), nullable=False)
    issued_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    issued_by: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("character.id"), nullable=False,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    public_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    revoked_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    revoked_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("character.id"), nullable=True,
    )
