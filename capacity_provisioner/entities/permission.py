from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

ANY_SOURCE = "*"


class Permission(Enum):
    ADMINISTER = "administer"
    PROVISION = "provision"

    def is_implied_by(self, other: "Permission") -> bool:
        return self == other or other == Permission.ADMINISTER


@dataclass(frozen=True)
class Actor:
    name: str

    SYSTEM: ClassVar["Actor"]

    def is_system(self) -> bool:
        return self is Actor.SYSTEM


Actor.SYSTEM = Actor("SYSTEM")


@dataclass(frozen=True)
class PermissionGrant:
    actor_name: str
    permissions: frozenset[Permission]
    source_names: frozenset[str] = field(default_factory=lambda: frozenset({ANY_SOURCE}))

    def covers(self, actor: Actor, permission: Permission, source_name: str) -> bool:
        if actor.name != self.actor_name:
            return False

        if ANY_SOURCE not in self.source_names and source_name not in self.source_names:
            return False

        return any(permission.is_implied_by(granted) for granted in self.permissions)
