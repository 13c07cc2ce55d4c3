"""Ban Routes - list, create, history, amend and revoke under /api/v2/bans.

Invariants:
    - Every route requires bans-manage before anything else runs
    - Routes hold no business logic; BanService decides, errors map via handlers
    - Mutations acknowledge with {"message": "Ok"}

Design Decisions:
    - history and current take ?category= (default Character) so corporation
      and alliance bans are reachable through the same paths
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_ban_service, require_access
from app.core.access_control import AuthenticatedAccount
from app.core.domain_types import BanId, EntityCategory, EntityId, Permission
from app.schemas.ban import BanAmend, BanCreate, BanResponse
from app.services.ban_service import BanService

router = APIRouter(prefix="/api/v2/bans", tags=["bans"])

_manage = require_access(Permission.BANS_MANAGE)


@router.get("", response_model=list[BanResponse])
async def list_bans(
    account: AuthenticatedAccount = Depends(_manage),
    service: BanService = Depends(get_ban_service),
):
    """Every ban active right now."""
    return [BanResponse.from_classified(b) for b in await service.list_active()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ban(
    body: BanCreate,
    account: AuthenticatedAccount = Depends(_manage),
    service: BanService = Depends(get_ban_service),
):
    ban_id = await service.create(
        account,
        entity=body.entity.model_dump() if body.entity else None,
        reason=body.reason,
        public_reason=body.public_reason,
        scheduled_end=body.revoked_at,
    )
    return {"message": "Ok", "id": ban_id}


@router.get("/{entity_id}", response_model=list[BanResponse])
async def entity_history(
    entity_id: int,
    category: EntityCategory = Query(EntityCategory.CHARACTER),
    account: AuthenticatedAccount = Depends(_manage),
    service: BanService = Depends(get_ban_service),
):
    """Full ban history for one entity, oldest first. Empty list if none."""
    bans = await service.history(EntityId(entity_id), category)
    return [BanResponse.from_classified(b) for b in bans]


@router.get("/{entity_id}/current", response_model=BanResponse | None)
async def entity_current_ban(
    entity_id: int,
    category: EntityCategory = Query(EntityCategory.CHARACTER),
    account: AuthenticatedAccount = Depends(_manage),
    service: BanService = Depends(get_ban_service),
):
    ban = await service.current_ban(EntityId(entity_id), category)
    return BanResponse.from_classified(ban) if ban else None


@router.patch("/{ban_id}")
async def amend_ban(
    ban_id: int,
    body: BanAmend,
    account: AuthenticatedAccount = Depends(_manage),
    service: BanService = Depends(get_ban_service),
):
    await service.amend(
        account,
        BanId(ban_id),
        reason=body.reason,
        public_reason=body.public_reason,
        scheduled_end=body.revoked_at,
    )
    return {"message": "Ok"}


@router.delete("/{ban_id}")
async def revoke_ban(
    ban_id: int,
    account: AuthenticatedAccount = Depends(_manage),
    service: BanService = Depends(get_ban_service),
):
    await service.revoke(account, BanId(ban_id))
    return {"message": "Ok"}
