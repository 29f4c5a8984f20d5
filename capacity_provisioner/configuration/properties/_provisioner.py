from typing import Optional

from pydantic import Field

from ._base import BaseConfig as _BaseConfig


class ProvisionerConfig(_BaseConfig):
    interval: float = Field(10, gt=0, description="Seconds between two provisioning ticks")
    completion_timeout: Optional[float] = Field(
        None,
        gt=0,
        description="Seconds after which a planned capacity that did not complete is considered failed. If not set, the provisioner waits forever."
    )


class RetentionConfig(_BaseConfig):
    interval: float = Field(60, gt=0, description="Seconds between two retention checks of the provisioned nodes")
    idle_timeout: float = Field(600, ge=0, description="Default seconds a node can stay idle before being removed, 0 keeps nodes forever")
    release_workers: int = Field(4, ge=1, description="Number of threads releasing the external resources of removed nodes")
