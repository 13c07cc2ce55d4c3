"""Ban Service - create, amend, revoke and query bans through the boundary protocols.

Invariants:
    - Callers are already permission-checked; this service never checks access
    - create: malformed check -> admin registry -> ESI -> one insert
    - amend/revoke: the conditional update runs FIRST; the ban is only re-read
      when the update missed, to explain why (not found / not active / conflict)
    - Every read result is classified with classify_ban at the same `now`
      used for the query
    - Failures from collaborators propagate unchanged; nothing is retried

Design Decisions:
    - Impureim sandwich: IO via protocols, decisions via core/ban_lifecycle.py
    - Clock injected: tests pin `now` without patching datetime
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from app.core.access_control import AuthenticatedAccount
from app.core.ban_lifecycle import (
    BanState,
    classify_ban,
    compute_expiry,
    missing_entity_fields,
    privileged_entity_violation,
    revocation_conflict,
)
from app.core.domain_types import (
    BanId, EntityCategory, EntityId, UnixTimestamp,
)
from app.core.errors import (
    BanNotActiveError,
    ErrorContext,
    MalformedRequestError,
    ResourceNotFoundError,
)
from app.core.repository_protocols import (
    AdminRegistry, BanRecord, BanRepository, EntityRecord, EntityResolver, NewBan,
)

logger = logging.getLogger(__name__)


def utc_now() -> UnixTimestamp:
    return UnixTimestamp(int(datetime.now(timezone.utc).timestamp()))


@dataclass(frozen=True)
class ClassifiedBan:
    """A stored ban together with its lifecycle state at query time."""
    record: BanRecord
    state: BanState


def _classify(record: BanRecord, now: int) -> ClassifiedBan:
    revoked_by = record.revoked_by.id if record.revoked_by else None
    return ClassifiedBan(
        record=record, state=classify_ban(record.revoked_at, revoked_by, now),
    )


class BanService:
    """Ban lifecycle engine and query service."""

    def __init__(
        self,
        bans: BanRepository,
        admins: AdminRegistry,
        resolver: EntityResolver,
        clock: Callable[[], UnixTimestamp] = utc_now,
    ):
        self.bans = bans
        self.admins = admins
        self.resolver = resolver
        self.clock = clock

    # ─── Queries ─────────────────────────────────────────────────

    async def list_active(self) -> list[ClassifiedBan]:
        now = self.clock()
        return [_classify(r, now) for r in await self.bans.list_active(now)]

    async def history(
        self, entity_id: EntityId, category: EntityCategory,
    ) -> list[ClassifiedBan]:
        """Every ban ever recorded for the entity; empty when it has none."""
        now = self.clock()
        records = await self.bans.list_for_entity(entity_id, category)
        return [_classify(r, now) for r in records]

    async def current_ban(
        self, entity_id: EntityId, category: EntityCategory,
    ) -> ClassifiedBan | None:
        """The ban currently keeping this entity off the waitlist, if any."""
        now = self.clock()
        record = await self.bans.find_active_for_entity(entity_id, category, now)
        return _classify(record, now) if record else None

    # ─── Mutations ───────────────────────────────────────────────

    async def create(
        self,
        account: AuthenticatedAccount,
        entity: dict | None,
        reason: str,
        public_reason: str | None = None,
        scheduled_end: int | None = None,
    ) -> BanId:
        missing = missing_entity_fields(entity)
        if missing:
            raise MalformedRequestError(
                f"One or more body parameters are missing: {missing}",
                [f"entity.{name}" for name in missing],
            )
        entity_id = EntityId(int(entity["id"]))
        category = EntityCategory(entity["category"])

        role = await self.admins.lookup_privileged_role(entity_id)
        violation = privileged_entity_violation(role, entity_id)
        if violation:
            logger.warning(
                f"Refused to ban privileged {category.value} {entity_id} ({role})",
                extra={"entity_id": entity_id, "account_id": account.id},
            )
            raise violation

        name = await self.resolver.resolve_name(category, entity_id)

        now = self.clock()
        ban_id = await self.bans.insert(NewBan(
            entity=EntityRecord(id=entity_id, name=name, category=category),
            issued_at=now,
            issued_by=account.id,
            reason=reason,
            public_reason=public_reason,
            revoked_at=compute_expiry(scheduled_end),
        ))
        logger.info(
            f"{account.name} banned {category.value} {name} ({entity_id})",
            extra={
                "ban_id": ban_id, "entity_id": entity_id,
                "entity_type": category.value, "account_id": account.id,
            },
        )
        return ban_id

    async def amend(
        self,
        account: AuthenticatedAccount,
        ban_id: BanId,
        reason: str,
        public_reason: str | None = None,
        scheduled_end: int | None = None,
    ) -> None:
        """Re-issue an active ban with new reasons and end under `account`."""
        now = self.clock()
        amended = await self.bans.amend_if_active(
            ban_id,
            reason=reason,
            public_reason=public_reason,
            revoked_at=compute_expiry(scheduled_end),
            issued_by=account.id,
            now=now,
        )
        if amended:
            logger.info(
                f"{account.name} amended ban {ban_id}",
                extra={"ban_id": ban_id, "account_id": account.id},
            )
            return

        if await self.bans.get(ban_id) is None:
            raise ResourceNotFoundError("ban", str(ban_id), ErrorContext(ban_id=ban_id))
        logger.warning(
            f"Refused to amend inactive ban {ban_id}",
            extra={"ban_id": ban_id, "account_id": account.id},
        )
        raise BanNotActiveError(ban_id, ErrorContext(ban_id=ban_id))

    async def revoke(self, account: AuthenticatedAccount, ban_id: BanId) -> None:
        """Manually end an active ban now. Exactly one concurrent caller wins."""
        now = self.clock()
        if await self.bans.revoke_if_active(ban_id, account.id, now):
            logger.info(
                f"{account.name} revoked ban {ban_id}",
                extra={"ban_id": ban_id, "account_id": account.id},
            )
            return

        record = await self.bans.get(ban_id)
        if record is None:
            raise ResourceNotFoundError("ban", str(ban_id), ErrorContext(ban_id=ban_id))

        state = _classify(record, now).state
        revoker_name = record.revoked_by.name if record.revoked_by else None
        # A missed update leaves an expired or revoked row, never an active one
        conflict = revocation_conflict(state, revoker_name, ban_id)
        logger.warning(
            f"Refused to revoke ban {ban_id}: {conflict.message}",
            extra={"ban_id": ban_id, "account_id": account.id, "error_code": conflict.code},
        )
        raise conflict
