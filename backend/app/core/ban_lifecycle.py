"""Ban Lifecycle - classification, expiry computation and transition guards.

Invariants:
    - A ban is active at T iff revoked_at is None or revoked_at > T, and no
      moderator has revoked it
    - A recorded revoker is final: revoked_by set means ManualRevocation even
      when the caller's clock reads earlier than the stored revocation instant
    - An inactive ban without a revoker is ScheduledExpiry
    - classify_ban is the single source of truth; no caller re-derives state from raw fields
    - A scheduled end D is stored as D + DOWNTIME_OFFSET_SECONDS
    - Guard functions are PURE: they return an error or None and never raise

Design Decisions:
    - Tagged state as frozen dataclasses over a status string: call sites pattern-match
      on type and get the fields that only exist in that state (revoker, instant)
    - Guards return errors instead of raising, mirroring the shell-applies-effect
      split used across core/
"""

from dataclasses import dataclass

from app.core.domain_types import AccountId, BanStatus, UnixTimestamp
from app.core.errors import (
    BanAlreadyExpiredError,
    BanAlreadyRevokedError,
    BanConflictError,
    ErrorContext,
    PrivilegedEntityError,
)


# Aligns scheduled ends with the daily server downtime (11:00 UTC).
DOWNTIME_OFFSET_SECONDS: int = 60 * 60 * 11

REQUIRED_ENTITY_FIELDS: tuple[str, ...] = ("id", "category")


# ─── Lifecycle states ────────────────────────────────────────────

@dataclass(frozen=True)
class ActiveBan:
    """In force. expires_at is None for permanent bans."""
    expires_at: UnixTimestamp | None = None

    @property
    def is_permanent(self) -> bool:
        return self.expires_at is None


@dataclass(frozen=True)
class ScheduledExpiry:
    """Ended on its own at the pre-set instant."""
    at: UnixTimestamp


@dataclass(frozen=True)
class ManualRevocation:
    """Ended by an explicit revoke from a moderator."""
    at: UnixTimestamp
    by: AccountId


BanState = ActiveBan | ScheduledExpiry | ManualRevocation


def is_active(revoked_at: int | None, now: int) -> bool:
    """Active iff there is no end, or the end is strictly in the future."""
    return revoked_at is None or revoked_at > now


def classify_ban(
    revoked_at: int | None, revoked_by: int | None, now: int,
) -> BanState:
    """Classify a ban from its two raw end fields as seen at `now`."""
    if revoked_by is not None:
        return ManualRevocation(at=UnixTimestamp(revoked_at), by=AccountId(revoked_by))
    if is_active(revoked_at, now):
        return ActiveBan(
            expires_at=UnixTimestamp(revoked_at) if revoked_at is not None else None,
        )
    return ScheduledExpiry(at=UnixTimestamp(revoked_at))


def ban_status(state: BanState) -> BanStatus:
    if isinstance(state, ActiveBan):
        return BanStatus.ACTIVE
    if isinstance(state, ScheduledExpiry):
        return BanStatus.EXPIRED
    return BanStatus.REVOKED


def compute_expiry(scheduled_end: int | None) -> UnixTimestamp | None:
    """Shift a caller-supplied day into the downtime window. None stays permanent."""
    if scheduled_end is None:
        return None
    return UnixTimestamp(scheduled_end + DOWNTIME_OFFSET_SECONDS)


# ─── Guards ──────────────────────────────────────────────────────

def missing_entity_fields(entity: dict | None) -> list[str]:
    """Fields that must be present to resolve and store a banned entity."""
    if entity is None:
        return list(REQUIRED_ENTITY_FIELDS)
    return [name for name in REQUIRED_ENTITY_FIELDS if entity.get(name) is None]


def privileged_entity_violation(
    role: str | None, entity_id: int | None = None,
) -> PrivilegedEntityError | None:
    """Admins and FCs may not be banned by other moderators."""
    if role is None:
        return None
    return PrivilegedEntityError(role, ErrorContext(entity_id=entity_id))


def revocation_conflict(
    state: BanState, revoker_name: str | None = None, ban_id: int | None = None,
) -> BanConflictError | None:
    """Why an inactive ban cannot be revoked, or None when it still can."""
    if isinstance(state, ActiveBan):
        return None
    context = ErrorContext(ban_id=ban_id)
    if isinstance(state, ScheduledExpiry):
        return BanAlreadyExpiredError(context)
    return BanAlreadyRevokedError(
        state.by, revoker_name or f"Character {state.by}", context,
    )
