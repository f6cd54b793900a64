"""
Permission checks for the claim command.

The claim transaction only needs `user_has_permission(player_id, name)`;
which subsystem answers it depends on the host:

- PermissionRegistry: in-process registry of named permissions and grants
  (used by tests and by hosts without a role system)
- RolePermissionChecker: Discord host, maps the permission to a guild role
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Set, runtime_checkable

from claimrewards.core.logging.logger import get_logger

logger = get_logger(__name__)

CLAIM_PERMISSION = "claimplayerrewards.use"


@runtime_checkable
class PermissionChecker(Protocol):
    def user_has_permission(self, player_id: str, permission: str) -> bool:
        ...


class PermissionRegistry:
    """
    Named permissions granted to individual players.

    Checking a permission that was never registered is always False.
    """

    def __init__(self) -> None:
        self._registered: Set[str] = set()
        self._grants: Dict[str, Set[str]] = {}

    def register_permission(self, permission: str) -> None:
        if permission not in self._registered:
            self._registered.add(permission)
            logger.debug(f"Registered permission {permission}")

    def is_registered(self, permission: str) -> bool:
        return permission in self._registered

    def grant(self, player_id: str, permission: str) -> None:
        if permission not in self._registered:
            raise KeyError(f"Permission '{permission}' is not registered")
        self._grants.setdefault(player_id, set()).add(permission)

    def revoke(self, player_id: str, permission: str) -> None:
        self._grants.get(player_id, set()).discard(permission)

    def user_has_permission(self, player_id: str, permission: str) -> bool:
        if permission not in self._registered:
            return False
        return permission in self._grants.get(player_id, set())


class RolePermissionChecker:
    """
    Discord role gate for one invoking member.

    With no role configured every member holds the permission. Otherwise the
    member must have a role with exactly that name. Built per command
    invocation from the author's roles (`for_member`).
    """

    def __init__(
        self,
        player_id: str,
        required_role: Optional[str] = None,
        role_names: Iterable[str] = (),
    ) -> None:
        self.player_id = player_id
        self.required_role = required_role
        self.role_names: Set[str] = set(role_names)

    @classmethod
    def for_member(cls, member, required_role: Optional[str] = None) -> "RolePermissionChecker":
        # Direct messages give a discord.User, which has no roles
        roles = getattr(member, "roles", None) or []
        return cls(
            player_id=str(member.id),
            required_role=required_role,
            role_names=(role.name for role in roles),
        )

    def user_has_permission(self, player_id: str, permission: str) -> bool:
        if permission != CLAIM_PERMISSION or player_id != self.player_id:
            return False
        if not self.required_role:
            return True
        return self.required_role in self.role_names
