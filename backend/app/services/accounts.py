"""Account Lookup - builds the AuthenticatedAccount for a forwarded character id.

Invariants:
    - Unknown character ids yield None (the caller answers 401)
    - Characters without an admin row get an account with no permissions
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access_control import AuthenticatedAccount
from app.models.admin import Admin
from app.models.character import Character


async def load_account(
    db: AsyncSession, account_id: int,
) -> AuthenticatedAccount | None:
    """Load a character and its admin role, if any."""
    result = await db.execute(
        select(Character.id, Character.name, Admin.role)
        .outerjoin(Admin, Admin.character_id == Character.id)
        .where(Character.id == account_id),
    )
    row = result.one_or_none()
    if row is None:
        return None
    return AuthenticatedAccount.for_role(row.id, row.name, row.role)
