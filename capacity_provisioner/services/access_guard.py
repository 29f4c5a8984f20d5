from typing import Iterable

from ..configuration import SecurityConfig
from ..entities import Actor, Permission, PermissionDeniedError, PermissionGrant
from ..utils.logging_utils import get_logger
from .capacity_source import CapacitySource


def _source_name(target: CapacitySource | str) -> str:
    return target.name if isinstance(target, CapacitySource) else target


def is_permitted(grants: Iterable[PermissionGrant], actor: Actor, permission: Permission, target: CapacitySource | str) -> bool:
    if actor.is_system():
        return True

    source_name = _source_name(target)
    return any(
        grant.covers(actor, permission, source_name)
        for grant in grants
    )


class AccessGuard:

    def __init__(self, grants: Iterable[PermissionGrant] = ()):
        self.grants = tuple(grants)

    @staticmethod
    def from_config(config: SecurityConfig) -> "AccessGuard":
        return AccessGuard(
            PermissionGrant(
                actor_name=grant.actor,
                permissions=frozenset(Permission(permission) for permission in grant.permissions),
                source_names=frozenset(grant.sources),
            )
            for grant in config.grants
        )

    def has_permission(self, actor: Actor, permission: Permission, target: CapacitySource | str) -> bool:
        return is_permitted(self.grants, actor, permission, target)

    def check_permission(self, actor: Actor, permission: Permission, target: CapacitySource | str):
        if not self.has_permission(actor, permission, target):
            get_logger().warning(f"Permission {permission.value} denied to {actor.name} on {_source_name(target)}")
            raise PermissionDeniedError(actor.name, permission.value, _source_name(target))
