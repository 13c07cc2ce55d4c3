"""Ban request/response schemas.

Invariants:
    - reason is stripped and must not be blank
    - a blank public_reason is stored as None
    - entity is optional so the service can report MALFORMED_REQUEST itself
    - BanResponse.status follows the lifecycle state, never the raw columns
"""

import pytest
from pydantic import ValidationError

from app.core.ban_lifecycle import ActiveBan, ManualRevocation, ScheduledExpiry
from app.core.domain_types import EntityCategory
from app.core.repository_protocols import AccountRecord, BanRecord, EntityRecord
from app.schemas.ban import BanAmend, BanCreate, BanResponse
from app.services.ban_service import ClassifiedBan


def _record(**overrides) -> BanRecord:
    values = dict(
        id=7,
        entity=EntityRecord(id=500, name="Cheaty McCheatface", category=EntityCategory.CHARACTER),
        issued_at=1_700_000_000,
        issued_by=AccountRecord(id=2112000001, name="Mod One"),
        reason="cheating",
        public_reason=None,
        revoked_at=None,
        revoked_by=None,
    )
    values.update(overrides)
    return BanRecord(**values)


# --- requests -----------------------------------------------------------------

def test_reason_is_stripped():
    body = BanAmend(reason="  cheating  ")
    assert body.reason == "cheating"


def test_whitespace_reason_rejected():
    with pytest.raises(ValidationError):
        BanAmend(reason="   ")


def test_reason_max_length_enforced():
    with pytest.raises(ValidationError):
        BanAmend(reason="x" * 4001)


def test_blank_public_reason_becomes_none():
    body = BanAmend(reason="cheating", public_reason="  ")
    assert body.public_reason is None


def test_negative_scheduled_end_rejected():
    with pytest.raises(ValidationError):
        BanAmend(reason="cheating", revoked_at=-1)


def test_create_entity_is_optional():
    body = BanCreate(reason="cheating")
    assert body.entity is None


def test_create_parses_entity_category():
    body = BanCreate(reason="x", entity={"id": 98000001, "category": "Corporation"})
    assert body.entity.category is EntityCategory.CORPORATION


def test_create_rejects_unknown_category():
    with pytest.raises(ValidationError):
        BanCreate(reason="x", entity={"id": 1, "category": "Planet"})


def test_create_rejects_non_positive_entity_id():
    with pytest.raises(ValidationError):
        BanCreate(reason="x", entity={"id": 0, "category": "Character"})


# --- responses ----------------------------------------------------------------

def test_response_for_permanent_active_ban():
    resp = BanResponse.from_classified(ClassifiedBan(_record(), ActiveBan()))

    assert resp.status == "active"
    assert resp.revoked_by is None
    assert resp.issued_by.name == "Mod One"
    assert resp.entity.category is EntityCategory.CHARACTER


def test_response_for_expired_ban():
    record = _record(revoked_at=1_700_039_600)
    resp = BanResponse.from_classified(
        ClassifiedBan(record, ScheduledExpiry(at=1_700_039_600)),
    )
    assert resp.status == "expired"
    assert resp.revoked_at == 1_700_039_600


def test_response_for_revoked_ban_names_revoker():
    revoker = AccountRecord(id=2112000002, name="Mod Two")
    record = _record(revoked_at=1_700_000_500, revoked_by=revoker)
    resp = BanResponse.from_classified(
        ClassifiedBan(record, ManualRevocation(at=1_700_000_500, by=revoker.id)),
    )

    assert resp.status == "revoked"
    assert resp.revoked_by.model_dump() == {"id": 2112000002, "name": "Mod Two"}
