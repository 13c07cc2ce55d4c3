"""Access Control - role to permission mapping and the require_access check.

Invariants:
    - require_access runs before any ban store access in every route
    - Accounts without an admin role hold no permissions
    - Role names match admin.role values exactly

Design Decisions:
    - Static mapping in code, not a table: roles change with releases, not at runtime
"""

from dataclasses import dataclass, field

from app.core.domain_types import AccountId, Permission
from app.core.errors import UnauthorizedError, ErrorContext


ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "Council": frozenset({Permission.BANS_MANAGE.value}),
    "Leadership": frozenset({Permission.BANS_MANAGE.value}),
    "Instructor": frozenset({Permission.BANS_MANAGE.value}),
    "FC": frozenset(),
    "Trainee FC": frozenset(),
}


def permissions_for_role(role: str | None) -> frozenset[str]:
    if role is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(role, frozenset())


@dataclass(frozen=True)
class AuthenticatedAccount:
    """The acting moderator, as forwarded by the authenticating gateway."""
    id: AccountId
    name: str
    role: str | None = None
    access: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def for_role(cls, id: int, name: str, role: str | None) -> "AuthenticatedAccount":
        return cls(
            id=AccountId(id), name=name, role=role,
            access=permissions_for_role(role),
        )

    def require_access(self, permission: Permission | str) -> None:
        """Raise UnauthorizedError unless the account holds `permission`."""
        name = permission.value if isinstance(permission, Permission) else permission
        if name not in self.access:
            raise UnauthorizedError(
                f"Missing permission: {name}",
                permission=name,
                context=ErrorContext(account_id=self.id),
            )
