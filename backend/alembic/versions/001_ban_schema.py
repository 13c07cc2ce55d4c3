"""Ban schema - character, admin, ban.

Revision ID: 001_ban_schema
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_ban_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "character",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("corporation_id", sa.BigInteger, nullable=True),
    )

    op.create_table(
        "admin",
        sa.Column(
            "character_id", sa.BigInteger, sa.ForeignKey("character.id"),
            primary_key=True, autoincrement=False,
        ),
        sa.Column("role", sa.String(64), nullable=False),
        sa.Column("granted_at", sa.BigInteger, nullable=False),
        sa.Column("granted_by", sa.BigInteger, sa.ForeignKey("character.id"), nullable=True),
    )

    op.create_table(
        "ban",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("entity_id", sa.BigInteger, nullable=False),
        sa.Column("entity_name", sa.String(255), nullable=True),
        sa.Column("entity_type", sa.String(16), nullable=False),
        sa.Column("issued_at", sa.BigInteger, nullable=False),
        sa.Column("issued_by", sa.BigInteger, sa.ForeignKey("character.id"), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("public_reason", sa.Text, nullable=True),
        sa.Column("revoked_at", sa.BigInteger, nullable=True),
        sa.Column("revoked_by", sa.BigInteger, sa.ForeignKey("character.id"), nullable=True),
    )
    op.create_index("ix_ban_entity", "ban", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("ix_ban_entity", table_name="ban")
    op.drop_table("ban")
    op.drop_table("admin")
    op.drop_table("character")
