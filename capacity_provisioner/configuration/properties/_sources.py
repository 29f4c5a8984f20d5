from typing import Dict, List, Literal, Optional, Union

from pydantic import Field

from ._base import BaseConfig as _BaseConfig

SOURCE_NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


class _CapacitySourceConfig(_BaseConfig):
    name: str = Field(..., pattern=SOURCE_NAME_PATTERN, description="Unique short identifier of the source, also used in URLs")
    display_name: Optional[str] = Field(None, description="Human readable name, defaults to the name")
    labels: Optional[List[str]] = Field(
        None,
        description="Labels the provisioned nodes carry. If not set, the source only serves untagged demand."
    )
    executors_per_node: int = Field(1, ge=1, description="Number of executors of each provisioned node")
    max_nodes: int = Field(0, ge=0, description="Maximum number of live nodes for this source, 0 = unlimited")
    idle_timeout: Optional[float] = Field(
        None,
        ge=0,
        description="Seconds a node of this source can stay idle before removal. Defaults to retention.idle-timeout, 0 keeps nodes forever."
    )


class DummyCapacitySourceConfig(_CapacitySourceConfig):
    type: Literal["dummy"] = "dummy"
    boot_delay: float = Field(0, ge=0, description="Simulated seconds needed to bring a node online")


class DockerCapacitySourceConfig(_CapacitySourceConfig):
    type: Literal["docker"] = "docker"
    image: str = Field(..., description="Docker image started for each node")
    docker_network_name: Optional[str] = Field(None, description="Docker network the node containers are attached to")
    environment: Dict[str, str] = Field(default_factory=dict, description="Environment variables passed to the node containers")
    stop_timeout: int = Field(10, ge=0, description="Seconds given to a container to stop before it is killed")


CapacitySourceConfig = Union[DummyCapacitySourceConfig, DockerCapacitySourceConfig]
