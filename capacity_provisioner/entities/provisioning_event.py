from datetime import datetime
from enum import Enum

from .failure import Failure


class ProvisioningEvent:
    """
    Entry of the provisioning history.
    """

    class Kind(Enum):
        REQUESTED = "REQUESTED"
        PLANNED = "PLANNED"
        SUCCEEDED = "SUCCEEDED"
        FAILED = "FAILED"
        SOURCE_FAILED = "SOURCE_FAILED"
        UNMET_DEMAND = "UNMET_DEMAND"
        NODE_REMOVED = "NODE_REMOVED"
        RELEASE_FAILED = "RELEASE_FAILED"

    def __init__(
            self,
            kind: Kind,
            source_name: str | None = None,
            label: str | None = None,
            description: str | None = None,
            executors: int | None = None,
            node_name: str | None = None,
            failure: Failure | None = None,
            occurred_at: datetime | None = None,
            id: int | None = None,
        ):
        self.id = id
        self.kind = kind
        self.source_name = source_name
        self.label = label
        self.description = description
        self.executors = executors
        self.node_name = node_name
        self.failure = failure
        self.occurred_at = occurred_at if occurred_at else datetime.now()

    def __repr__(self) -> str:
        return f"ProvisioningEvent(kind={self.kind.value}, source_name={self.source_name!r}, label={self.label!r}, node_name={self.node_name!r})"
