"""Boundary Protocols - contracts between the ban core and the shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO (ban store, admin registry, ESI) accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - Conditional mutations (amend_if_active, revoke_if_active) return whether a
      row changed; the check and the write are one statement in the store
"""

from dataclasses import dataclass
from typing import Protocol

from app.core.domain_types import (
    AccountId, BanId, EntityCategory, EntityId, UnixTimestamp,
)


@dataclass(frozen=True)
class EntityRecord:
    """A banned subject with its resolved display name."""
    id: EntityId
    name: str | None
    category: EntityCategory


@dataclass(frozen=True)
class AccountRecord:
    """Display identity of a moderator account."""
    id: AccountId
    name: str


@dataclass(frozen=True)
class BanRecord:
    """One row of the ban store, with issuer/revoker identities joined."""
    id: BanId
    entity: EntityRecord
    issued_at: UnixTimestamp
    issued_by: AccountRecord
    reason: str
    public_reason: str | None
    revoked_at: UnixTimestamp | None
    revoked_by: AccountRecord | None


@dataclass(frozen=True)
class NewBan:
    """Values for an insert; revoked_by is never set on creation."""
    entity: EntityRecord
    issued_at: UnixTimestamp
    issued_by: AccountId
    reason: str
    public_reason: str | None
    revoked_at: UnixTimestamp | None


class BanRepository(Protocol):
    """Contract for ban persistence - implemented by shell."""
    async def insert(self, ban: NewBan) -> BanId: ...
    async def get(self, ban_id: BanId) -> BanRecord | None: ...
    async def list_active(self, now: UnixTimestamp) -> list[BanRecord]: ...
    async def list_for_entity(
        self, entity_id: EntityId, category: EntityCategory,
    ) -> list[BanRecord]: ...
    async def find_active_for_entity(
        self, entity_id: EntityId, category: EntityCategory, now: UnixTimestamp,
    ) -> BanRecord | None: ...
    async def amend_if_active(
        self,
        ban_id: BanId,
        *,
        reason: str,
        public_reason: str | None,
        revoked_at: UnixTimestamp | None,
        issued_by: AccountId,
        now: UnixTimestamp,
    ) -> bool: ...
    async def revoke_if_active(
        self, ban_id: BanId, revoked_by: AccountId, now: UnixTimestamp,
    ) -> bool: ...


class AdminRegistry(Protocol):
    """Read-only view of privileged accounts - implemented by shell."""
    async def lookup_privileged_role(self, entity_id: EntityId) -> str | None: ...


class EntityResolver(Protocol):
    """Resolves an entity's current display name - implemented by shell."""
    async def resolve_name(
        self, category: EntityCategory, entity_id: EntityId,
    ) -> str: ...
