import os
from typing import Annotated, List, Optional

from pydantic import Field, ValidationError, field_validator

from ._base import BaseConfig as _BaseConfig
from ._demand import DemandEntryConfig as DemandEntryConfig
from ._demand import DemandSourceConfig as DemandSourceConfig
from ._demand import StaticDemandConfig as StaticDemandConfig
from ._demand import YamlDemandConfig as YamlDemandConfig
from ._infrastructure import ApiConfig as ApiConfig
from ._infrastructure import DatabaseInfrastructureConfig as DatabaseInfrastructureConfig
from ._infrastructure import SqliteDatabaseInfrastructureConfig as SqliteDatabaseInfrastructureConfig
from ._logging import FileLoggingConfig as FileLoggingConfig
from ._logging import LoggingConfig as LoggingConfig
from ._provisioner import ProvisionerConfig as ProvisionerConfig
from ._provisioner import RetentionConfig as RetentionConfig
from ._security import GrantConfig as GrantConfig
from ._security import PermissionStringType as PermissionStringType
from ._security import SecurityConfig as SecurityConfig
from ._sources import CapacitySourceConfig as CapacitySourceConfig
from ._sources import DockerCapacitySourceConfig as DockerCapacitySourceConfig
from ._sources import DummyCapacitySourceConfig as DummyCapacitySourceConfig


class AppConfig(_BaseConfig):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    provisioner: ProvisionerConfig = Field(default_factory=ProvisionerConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    demand: DemandSourceConfig = Field(..., discriminator='type')
    sources: List[Annotated[CapacitySourceConfig, Field(..., discriminator='type')]] = Field(..., description="Ordered list of capacity sources, evaluated in this order")
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    database: DatabaseInfrastructureConfig = Field(..., discriminator='type')
    api: Optional[ApiConfig] = Field(None, description="Enable the admin HTTP API")

    @field_validator("sources")
    def validate_unique_source_names(cls, sources):
        seen = set()
        for source in sources:
            if source.name in seen:
                raise ValueError(f"Duplicate capacity source name: {source.name}")
            seen.add(source.name)
        return sources

    @staticmethod
    def from_yaml(yaml_content: str, *, exit_on_failure=True) -> 'AppConfig':
        import yaml
        expanded = os.path.expandvars(yaml_content)
        data = yaml.safe_load(expanded)

        try:
            return AppConfig(**data)
        except ValidationError as validation_error:
            if not exit_on_failure:
                raise

            for error in validation_error.errors():
                print(error["type"], error["loc"], error["msg"])

            exit(1)

    @staticmethod
    def from_file(file_path: str, *, exit_on_failure=True) -> 'AppConfig':
        with open(file_path, 'r') as f:
            return AppConfig.from_yaml(f.read(), exit_on_failure=exit_on_failure)
