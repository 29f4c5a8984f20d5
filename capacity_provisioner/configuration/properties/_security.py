from typing import List, Literal

from pydantic import Field

from ._base import BaseConfig as _BaseConfig

PermissionStringType = Literal["provision", "administer"]


class GrantConfig(_BaseConfig):
    actor: str = Field(..., description="Name of the actor receiving the permissions")
    permissions: List[PermissionStringType] = Field(..., min_length=1)
    sources: List[str] = Field(["*"], description="Names of the sources the grant applies to, `*` for all of them")


class SecurityConfig(_BaseConfig):
    grants: List[GrantConfig] = Field(default_factory=list)
