"""Ban Routes - HTTP contract of /api/v2/bans through the FastAPI app.

Tests cover:
    - Permission gate runs first: 401 without account, 403 without bans-manage,
      even when the body is invalid or the ban does not exist
    - Error envelopes for malformed, privileged, not found and conflict cases
    - Happy paths for list, create, history, current, amend, revoke
"""

import time

from app.core.errors import UpstreamDependencyError
from app.models.ban import Ban
from tests.services.fakes import (
    FC_ID, MODERATOR_ID, OFFENDER_ID, PILOT_ID, SECOND_MODERATOR_ID, as_account,
)

MOD = as_account(MODERATOR_ID)
MOD_TWO = as_account(SECOND_MODERATOR_ID)


def _next_month() -> int:
    return int(time.time()) + 30 * 86400


async def _seed_ban(test_db, **fields) -> int:
    now = int(time.time())
    values = {
        "entity_id": OFFENDER_ID,
        "entity_name": "Cheaty McCheatface",
        "entity_type": "Character",
        "issued_at": now,
        "issued_by": MODERATOR_ID,
        "reason": "cheating",
        **fields,
    }
    ban = Ban(**values)
    test_db.add(ban)
    await test_db.commit()
    return ban.id


# ─── access control ──────────────────────────────────────────────

async def test_missing_account_header_is_401(client):
    res = await client.get("/api/v2/bans")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHORIZED"


async def test_unknown_account_is_401(client):
    res = await client.get("/api/v2/bans", headers=as_account(1))
    assert res.status_code == 401


async def test_pilot_without_role_is_403(client):
    res = await client.get("/api/v2/bans", headers=as_account(PILOT_ID))
    assert res.status_code == 403


async def test_fc_cannot_manage_bans(client):
    res = await client.delete("/api/v2/bans/1", headers=as_account(FC_ID))
    assert res.status_code == 403


async def test_permission_checked_before_body_validation(client):
    res = await client.post(
        "/api/v2/bans", headers=as_account(PILOT_ID), json={"reason": ""},
    )
    assert res.status_code == 403


async def test_permission_checked_before_existence(client):
    res = await client.patch(
        "/api/v2/bans/999", headers=as_account(PILOT_ID), json={"reason": "x"},
    )
    assert res.status_code == 403


# ─── create ──────────────────────────────────────────────────────

async def test_create_ban(client, resolver):
    day = _next_month()
    res = await client.post(
        "/api/v2/bans",
        headers=MOD,
        json={
            "entity": {"id": OFFENDER_ID, "name": "whatever", "category": "Character"},
            "reason": "cheating",
            "public_reason": "Rule 3",
            "revoked_at": day,
        },
    )

    assert res.status_code == 201
    assert res.json()["message"] == "Ok"

    [ban] = (await client.get(f"/api/v2/bans/{OFFENDER_ID}", headers=MOD)).json()
    assert ban["id"] == res.json()["id"]
    assert ban["entity"] == {
        "id": OFFENDER_ID, "name": "Cheaty McCheatface", "category": "Character",
    }
    assert ban["revoked_at"] == day + 39600
    assert ban["revoked_by"] is None
    assert ban["issued_by"] == {"id": MODERATOR_ID, "name": "Mod One"}
    assert ban["public_reason"] == "Rule 3"
    assert ban["status"] == "active"


async def test_create_without_entity_is_malformed(client):
    res = await client.post("/api/v2/bans", headers=MOD, json={"reason": "cheating"})

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "MALFORMED_REQUEST"
    assert "id" in error["message"]


async def test_create_with_blank_reason_is_validation_error(client):
    res = await client.post(
        "/api/v2/bans", headers=MOD,
        json={"entity": {"id": OFFENDER_ID, "category": "Character"}, "reason": "   "},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_with_unknown_category_is_validation_error(client):
    res = await client.post(
        "/api/v2/bans", headers=MOD,
        json={"entity": {"id": OFFENDER_ID, "category": "Planet"}, "reason": "x"},
    )
    assert res.status_code == 400


async def test_create_privileged_entity_is_policy_violation(client):
    res = await client.post(
        "/api/v2/bans", headers=MOD,
        json={"entity": {"id": FC_ID, "category": "Character"}, "reason": "grudge"},
    )

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "POLICY_VIOLATION"
    assert error["message"] == "FC accounts cannot be banned."


async def test_create_with_esi_down_is_502(client, resolver):
    resolver.error = UpstreamDependencyError("HTTP 503", "esi")

    res = await client.post(
        "/api/v2/bans", headers=MOD,
        json={"entity": {"id": OFFENDER_ID, "category": "Character"}, "reason": "x"},
    )

    assert res.status_code == 502
    assert res.json()["error"]["code"] == "UPSTREAM_DEPENDENCY_ERROR"


# ─── list / history / current ────────────────────────────────────

async def test_list_only_returns_active_bans(client, test_db):
    now = int(time.time())
    active = await _seed_ban(test_db)
    await _seed_ban(test_db, entity_id=501, revoked_at=now - 3600)
    await _seed_ban(
        test_db, entity_id=502, revoked_at=now - 60, revoked_by=SECOND_MODERATOR_ID,
    )

    res = await client.get("/api/v2/bans", headers=MOD)

    assert res.status_code == 200
    assert [b["id"] for b in res.json()] == [active]


async def test_history_includes_inactive_bans(client, test_db):
    now = int(time.time())
    expired = await _seed_ban(test_db, revoked_at=now - 3600)
    revoked = await _seed_ban(
        test_db, revoked_at=now - 60, revoked_by=SECOND_MODERATOR_ID,
    )

    res = await client.get(f"/api/v2/bans/{OFFENDER_ID}", headers=MOD)

    bans = res.json()
    assert [b["id"] for b in bans] == [expired, revoked]
    assert [b["status"] for b in bans] == ["expired", "revoked"]
    assert bans[1]["revoked_by"] == {"id": SECOND_MODERATOR_ID, "name": "Mod Two"}


async def test_history_for_unbanned_entity_is_empty_list(client):
    res = await client.get("/api/v2/bans/123456", headers=MOD)
    assert res.status_code == 200
    assert res.json() == []


async def test_history_by_category(client, test_db):
    corp_ban = await _seed_ban(test_db, entity_id=98000001, entity_type="Corporation")

    res = await client.get(
        "/api/v2/bans/98000001", headers=MOD, params={"category": "Corporation"},
    )

    assert [b["id"] for b in res.json()] == [corp_ban]


async def test_current_ban(client, test_db):
    ban_id = await _seed_ban(test_db)

    res = await client.get(f"/api/v2/bans/{OFFENDER_ID}/current", headers=MOD)

    assert res.json()["id"] == ban_id


async def test_current_ban_is_null_when_clean(client):
    res = await client.get("/api/v2/bans/123456/current", headers=MOD)
    assert res.status_code == 200
    assert res.json() is None


# ─── amend ───────────────────────────────────────────────────────

async def test_amend_ban(client, test_db):
    ban_id = await _seed_ban(test_db)
    day = _next_month()

    res = await client.patch(
        f"/api/v2/bans/{ban_id}", headers=MOD_TWO,
        json={"reason": "cheating, confirmed", "revoked_at": day},
    )

    assert res.status_code == 200
    [ban] = (await client.get("/api/v2/bans", headers=MOD)).json()
    assert ban["reason"] == "cheating, confirmed"
    assert ban["issued_by"]["id"] == SECOND_MODERATOR_ID
    assert ban["revoked_at"] == day + 39600


async def test_amend_missing_ban_is_404(client):
    res = await client.patch("/api/v2/bans/999", headers=MOD, json={"reason": "x"})
    assert res.status_code == 404


async def test_amend_expired_ban_is_rejected(client, test_db):
    ban_id = await _seed_ban(test_db, revoked_at=int(time.time()) - 60)

    res = await client.patch(f"/api/v2/bans/{ban_id}", headers=MOD, json={"reason": "x"})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BAN_NOT_ACTIVE"


# ─── revoke ──────────────────────────────────────────────────────

async def test_revoke_then_second_revoke_conflicts(client, test_db):
    ban_id = await _seed_ban(test_db)

    first = await client.delete(f"/api/v2/bans/{ban_id}", headers=MOD)
    second = await client.delete(f"/api/v2/bans/{ban_id}", headers=MOD_TWO)

    assert first.status_code == 200
    assert second.status_code == 409
    error = second.json()["error"]
    assert error["code"] == "BAN_ALREADY_REVOKED"
    assert error["message"] == "Mod One has already revoked this ban"
    assert (await client.get("/api/v2/bans", headers=MOD)).json() == []


async def test_revoke_expired_ban_conflicts(client, test_db):
    ban_id = await _seed_ban(test_db, revoked_at=int(time.time()) - 60)

    res = await client.delete(f"/api/v2/bans/{ban_id}", headers=MOD)

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "BAN_ALREADY_EXPIRED"


async def test_revoke_missing_ban_is_404(client):
    res = await client.delete("/api/v2/bans/999", headers=MOD)
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Could not find a ban with the ID of 999"
