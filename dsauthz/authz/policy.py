"""
Role policy for dsauthz.
Maps (role, action) to a role-only grant.
"""

from types import MappingProxyType
from typing import Collection, Dict, FrozenSet, Mapping, Optional

from ..core.types import Action, ActionKind, Role, Status

DEFAULT_ROLE_PERMISSIONS: Mapping[Role, FrozenSet[ActionKind]] = MappingProxyType({
    Role.ADMIN: frozenset(ActionKind),
    Role.DESIGNER: frozenset({ActionKind.CREATE, ActionKind.READ}),
    Role.DEVELOPER: frozenset({ActionKind.CREATE, ActionKind.READ}),
})


class RolePolicy:
    """
    Static role table.

    ``permits`` answers whether the role alone grants an action. Updates and
    status changes for non-admins are not granted here; they depend on
    ownership and are decided by the engine. Deleting and approving are
    admin-only no matter what the table says.
    """

    def __init__(self, role_permissions: Optional[Mapping[Role, Collection[ActionKind]]] = None,
                 admin_roles: Optional[Collection[Role]] = None):
        table = role_permissions if role_permissions is not None else DEFAULT_ROLE_PERMISSIONS
        self._permissions: Dict[Role, FrozenSet[ActionKind]] = {
            Role(role): frozenset(kinds) for role, kinds in table.items()
        }
        self._admin_roles: FrozenSet[Role] = frozenset(admin_roles or {Role.ADMIN})

    @property
    def admin_roles(self) -> FrozenSet[Role]:
        return self._admin_roles

    def is_admin(self, role: Role) -> bool:
        return role in self._admin_roles

    def permits(self, role: Role, action: Action) -> bool:
        if action.kind == ActionKind.DELETE or action.target_status == Status.APPROVED:
            return self.is_admin(role)
        if self.is_admin(role):
            return True
        return action.kind in self._permissions.get(role, frozenset())

    def has_any_role(self, role: Role, allowed_roles: Collection[Role]) -> bool:
        """Exact membership check; an admin outside ``allowed_roles`` is refused."""
        return role in allowed_roles
