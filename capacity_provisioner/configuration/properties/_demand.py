from typing import List, Literal, Optional, Union

from pydantic import Field

from ._base import BaseConfig as _BaseConfig


class DemandEntryConfig(_BaseConfig):
    label: Optional[str] = Field(None, description="Label of the demanded capacity, empty for untagged capacity")
    excess_workload: int = Field(..., ge=0, description="Number of executors needed and not currently available")


class YamlDemandConfig(_BaseConfig):
    type: Literal["yaml"] = "yaml"
    path: str = Field(..., description="Path to the YAML file listing the demand, re-read on every tick")


class StaticDemandConfig(_BaseConfig):
    type: Literal["static"] = "static"
    entries: List[DemandEntryConfig] = Field(default_factory=list)


DemandSourceConfig = Union[YamlDemandConfig, StaticDemandConfig]
