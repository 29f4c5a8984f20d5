from typing import Union, Literal

from pydantic import Field

from ._base import BaseConfig as _BaseConfig


class SqliteDatabaseInfrastructureConfig(_BaseConfig):
    type: Literal["sqlite"] = "sqlite"
    path: str = Field(..., description="Path to the SQLite database.db file")


DatabaseInfrastructureConfig = Union[SqliteDatabaseInfrastructureConfig]


class ApiConfig(_BaseConfig):
    host: str = Field("127.0.0.1", description="Bind address of the admin HTTP API")
    port: int = Field(8001, description="Bind port of the admin HTTP API")
