"""Ban Store - SQLAlchemy implementation of the BanRepository and AdminRegistry protocols.

Invariants:
    - Every read joins the issuer character and, when present, the revoker
    - "Active at now" is expressed once, in _active_at(), as
      revoked_by IS NULL AND (revoked_at IS NULL OR revoked_at > now)
    - A manually revoked row never matches again, whatever `now` the caller
      read, so neither a second revoke nor an amend can touch it
    - amend_if_active and revoke_if_active are single conditional UPDATEs;
      rowcount == 1 means this call won, 0 means the row was absent or inactive
    - Each mutation commits itself: one store mutation per operation
    - Rows are never deleted

Design Decisions:
    - Conditional UPDATE over SELECT FOR UPDATE: closes the double-revoke race
      under plain read-committed isolation, and works identically on SQLite
    - Ordering by id: insertion order, stable across calls
    - Reads use populate_existing: conditional UPDATEs bypass the identity map
"""

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.domain_types import (
    AccountId, BanId, EntityCategory, EntityId, UnixTimestamp,
)
from app.core.errors import ErrorContext, UpstreamDependencyError
from app.core.repository_protocols import (
    AccountRecord, BanRecord, EntityRecord, NewBan,
)
from app.models.admin import Admin
from app.models.ban import Ban
from app.models.character import Character

_issuer = aliased(Character, name="issuer")
_revoker = aliased(Character, name="revoker")


def _active_at(now: int):
    return and_(
        Ban.revoked_by.is_(None),
        or_(Ban.revoked_at.is_(None), Ban.revoked_at > now),
    )


def _select_bans():
    return (
        select(Ban, _issuer.name, _revoker.name)
        .join(_issuer, Ban.issued_by == _issuer.id)
        .outerjoin(_revoker, Ban.revoked_by == _revoker.id)
        .execution_options(populate_existing=True)
    )


def _to_record(ban: Ban, issuer_name: str, revoker_name: str | None) -> BanRecord:
    revoked_by = None
    if ban.revoked_by is not None:
        revoked_by = AccountRecord(
            id=AccountId(ban.revoked_by),
            name=revoker_name or f"Character {ban.revoked_by}",
        )
    return BanRecord(
        id=BanId(ban.id),
        entity=EntityRecord(
            id=EntityId(ban.entity_id),
            name=ban.entity_name,
            category=EntityCategory(ban.entity_type),
        ),
        issued_at=UnixTimestamp(ban.issued_at),
        issued_by=AccountRecord(id=AccountId(ban.issued_by), name=issuer_name),
        reason=ban.reason,
        public_reason=ban.public_reason,
        revoked_at=(
            UnixTimestamp(ban.revoked_at) if ban.revoked_at is not None else None
        ),
        revoked_by=revoked_by,
    )


class SqlBanRepository:
    """Ban persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, ban: NewBan) -> BanId:
        row = Ban(
            entity_type=ban.entity.category.value,
            entity_id=ban.entity.id,
            entity_name=ban.entity.name,
            issued_at=ban.issued_at,
            issued_by=ban.issued_by,
            reason=ban.reason,
            public_reason=ban.public_reason,
            revoked_at=ban.revoked_at,
        )
        self.db.add(row)
        await self.db.flush()
        ban_id = BanId(row.id)
        await self.db.commit()
        return ban_id

    async def get(self, ban_id: BanId) -> BanRecord | None:
        result = await self.db.execute(_select_bans().where(Ban.id == ban_id))
        row = result.one_or_none()
        return _to_record(*row) if row else None

    async def list_active(self, now: UnixTimestamp) -> list[BanRecord]:
        result = await self.db.execute(
            _select_bans().where(_active_at(now)).order_by(Ban.id),
        )
        return [_to_record(*row) for row in result.all()]

    async def list_for_entity(
        self, entity_id: EntityId, category: EntityCategory,
    ) -> list[BanRecord]:
        result = await self.db.execute(
            _select_bans()
            .where(Ban.entity_id == entity_id)
            .where(Ban.entity_type == category.value)
            .order_by(Ban.id),
        )
        return [_to_record(*row) for row in result.all()]

    async def find_active_for_entity(
        self, entity_id: EntityId, category: EntityCategory, now: UnixTimestamp,
    ) -> BanRecord | None:
        result = await self.db.execute(
            _select_bans()
            .where(Ban.entity_id == entity_id)
            .where(Ban.entity_type == category.value)
            .where(_active_at(now))
            .order_by(Ban.id.desc())
            .limit(1),
        )
        row = result.first()
        return _to_record(*row) if row else None

    async def amend_if_active(
        self,
        ban_id: BanId,
        *,
        reason: str,
        public_reason: str | None,
        revoked_at: UnixTimestamp | None,
        issued_by: AccountId,
        now: UnixTimestamp,
    ) -> bool:
        result = await self.db.execute(
            update(Ban)
            .where(Ban.id == ban_id)
            .where(_active_at(now))
            .values(
                reason=reason,
                public_reason=public_reason,
                revoked_at=revoked_at,
                issued_by=issued_by,
                issued_at=now,
            )
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1

    async def revoke_if_active(
        self, ban_id: BanId, revoked_by: AccountId, now: UnixTimestamp,
    ) -> bool:
        result = await self.db.execute(
            update(Ban)
            .where(Ban.id == ban_id)
            .where(_active_at(now))
            .values(revoked_at=now, revoked_by=revoked_by)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1


class SqlAdminRegistry:
    """Privileged-role lookups against the admin table.

    The registry is a collaborator of the ban lifecycle, so a failed lookup is
    an upstream failure (502), not a ban store failure.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lookup_privileged_role(self, entity_id: EntityId) -> str | None:
        try:
            result = await self.db.execute(
                select(Admin.role).where(Admin.character_id == entity_id),
            )
        except SQLAlchemyError as e:
            raise UpstreamDependencyError(
                type(e).__name__, "admin_registry",
                ErrorContext(entity_id=entity_id),
            ) from e
        return result.scalar_one_or_none()
