"""Ban Schemas - request bodies and JSON responses for /api/v2/bans.

Invariants:
    - reason: 1-4000 chars, stripped, non-empty
    - revoked_at on requests is the caller's scheduled end DAY (unix seconds);
      the stored end is that value plus the downtime offset
    - entity is optional at the schema level so a missing entity surfaces as
      MALFORMED_REQUEST from the service rather than a generic validation error
    - Responses always carry status computed by classify_ban

Design Decisions:
    - Field names mirror the stored columns (issued_at, revoked_at, ...) so the
      frontend reads the same keys it writes
"""

from pydantic import BaseModel, Field, field_validator

from app.core.ban_lifecycle import ban_status
from app.core.domain_types import BanStatus, EntityCategory
from app.core.repository_protocols import AccountRecord


class EntityRef(BaseModel):
    """Entity as submitted by a moderator. name is ignored and re-resolved."""
    id: int | None = Field(None, gt=0)
    name: str | None = None
    category: EntityCategory | None = None


class _BanWrite(BaseModel):
    reason: str = Field(min_length=1, max_length=4000)
    public_reason: str | None = Field(None, max_length=4000)
    revoked_at: int | None = Field(None, ge=0)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason cannot be empty or whitespace")
        return v

    @field_validator("public_reason")
    @classmethod
    def blank_public_reason_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class BanCreate(_BanWrite):
    """POST /api/v2/bans body."""
    entity: EntityRef | None = None


class BanAmend(_BanWrite):
    """PATCH /api/v2/bans/{ban_id} body. Full overwrite of the mutable fields."""


class CharacterRef(BaseModel):
    id: int
    name: str

    @classmethod
    def from_record(cls, record: AccountRecord | None) -> "CharacterRef | None":
        if record is None:
            return None
        return cls(id=record.id, name=record.name)


class EntityResponse(BaseModel):
    id: int
    name: str | None
    category: EntityCategory


class BanResponse(BaseModel):
    """A ban as shown to moderators."""
    id: int
    entity: EntityResponse
    issued_at: int
    issued_by: CharacterRef
    reason: str
    public_reason: str | None = None
    revoked_at: int | None = None
    revoked_by: CharacterRef | None = None
    status: BanStatus

    @classmethod
    def from_classified(cls, ban) -> "BanResponse":
        record = ban.record
        return cls(
            id=record.id,
            entity=EntityResponse(
                id=record.entity.id,
                name=record.entity.name,
                category=record.entity.category,
            ),
            issued_at=record.issued_at,
            issued_by=CharacterRef.from_record(record.issued_by),
            reason=record.reason,
            public_reason=record.public_reason,
            revoked_at=record.revoked_at,
            revoked_by=CharacterRef.from_record(record.revoked_by),
            status=ban_status(ban.state),
        )
