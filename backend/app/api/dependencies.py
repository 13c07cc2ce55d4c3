"""Route Dependencies - acting account, permission gate and service wiring.

Invariants:
    - The gateway authenticates; this layer only trusts the configured account
      header (X-Account-Id by default), read once at import
    - require_access(...) resolves before path, query and body validation, so a
      caller without permission never learns whether a ban exists
    - No dependency here touches the ban table

Design Decisions:
    - Permission gate as a dependency factory: each route names its permission
      in its signature
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.access_control import AuthenticatedAccount
from app.core.domain_types import Permission
from app.core.errors import UnauthorizedError
from app.infrastructure.database import get_db
from app.infrastructure.esi_client import EsiEntityResolver, get_entity_resolver
from app.services.accounts import load_account
from app.services.ban_repository import SqlAdminRegistry, SqlBanRepository
from app.services.ban_service import BanService

ACCOUNT_HEADER = get_settings().account_header


async def get_current_account(
    account_id: int | None = Header(None, alias=ACCOUNT_HEADER),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedAccount:
    """Resolve the forwarded character id to an account, or answer 401."""
    if account_id is None:
        raise UnauthorizedError("Not authenticated", http_status=401)
    account = await load_account(db, account_id)
    if account is None:
        raise UnauthorizedError("Unknown account", http_status=401)
    return account


def require_access(permission: Permission):
    """Build a dependency that yields the account only if it holds `permission`."""

    async def dependency(
        account: AuthenticatedAccount = Depends(get_current_account),
    ) -> AuthenticatedAccount:
        account.require_access(permission)
        return account

    return dependency


def get_ban_service(
    db: AsyncSession = Depends(get_db),
    resolver: EsiEntityResolver = Depends(get_entity_resolver),
) -> BanService:
    return BanService(
        bans=SqlBanRepository(db),
        admins=SqlAdminRegistry(db),
        resolver=resolver,
    )
