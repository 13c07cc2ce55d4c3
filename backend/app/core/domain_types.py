"""Domain Types - rich types that replace bare primitives across the ban code.

Invariants:
    - Timestamps are unix seconds (UTC), matching the stored BIGINT columns
    - EntityCategory values are the exact strings stored in ban.entity_type
    - All valid states encoded as Enums - no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

BanId = NewType("BanId", int)
EntityId = NewType("EntityId", int)
AccountId = NewType("AccountId", int)


# ─── Value Types ─────────────────────────────────────────────────

UnixTimestamp = NewType("UnixTimestamp", int)


# ─── Enums ───────────────────────────────────────────────────────

class EntityCategory(str, Enum):
    """Kinds of entity that can be banned."""
    CHARACTER = "Character"
    CORPORATION = "Corporation"
    ALLIANCE = "Alliance"

    @property
    def esi_path(self) -> str:
        """Collection segment in ESI URLs: Character -> characters."""
        return f"{self.value.lower()}s"


class BanStatus(str, Enum):
    """Ban lifecycle classification as seen at a given instant."""
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class Permission(str, Enum):
    """Capabilities checked by require_access."""
    BANS_MANAGE = "bans-manage"
