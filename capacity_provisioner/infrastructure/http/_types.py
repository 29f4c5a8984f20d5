from datetime import datetime

from pydantic import BaseModel, Field

from ...entities import Node, PlannedCapacity, ProvisioningEvent
from ...services import CapacitySource


class SourceItem(BaseModel):
    name: str
    display_name: str
    url: str


class NodeItem(BaseModel):
    name: str
    source_name: str | None
    labels: list[str]
    num_executors: int
    busy_executors: int
    idle: bool
    pending_tasks: int
    created_at: datetime


class PlannedCapacityItem(BaseModel):
    id: str
    source_name: str | None
    label: str | None
    description: str
    promised_executors: int
    state: str
    requested_at: datetime | None


class PromiseItem(BaseModel):
    source_name: str
    label: str | None
    executors: int


class StatusResponse(BaseModel):
    sources: list[SourceItem]
    nodes: list[NodeItem]
    outstanding: list[PlannedCapacityItem]
    promised: list[PromiseItem]


class SourceDetailResponse(SourceItem):
    nodes: list[NodeItem]
    outstanding: list[PlannedCapacityItem]


class ProvisionRequest(BaseModel):
    label: str | None = None
    excess_workload: int = Field(1, ge=1)


class NodeActivityRequest(BaseModel):
    busy_executors: int = Field(ge=0)
    pending_tasks: int = Field(0, ge=0)


class EventItem(BaseModel):
    id: int | None
    kind: str
    source_name: str | None
    label: str | None
    description: str | None
    executors: int | None
    node_name: str | None
    error_code: str | None
    reason: str | None
    occurred_at: datetime


def make_source_item(source: CapacitySource) -> SourceItem:
    return SourceItem(name=source.name, display_name=source.display_name, url=source.url)


def make_node_item(node: Node) -> NodeItem:
    return NodeItem(
        name=node.name,
        source_name=node.source_name,
        labels=sorted(node.labels),
        num_executors=node.num_executors,
        busy_executors=node.busy_executors,
        idle=node.is_idle(),
        pending_tasks=node.pending_tasks,
        created_at=node.created_at,
    )


def make_planned_capacity_item(planned: PlannedCapacity) -> PlannedCapacityItem:
    return PlannedCapacityItem(
        id=planned.id,
        source_name=planned.source_name,
        label=planned.label,
        description=planned.description,
        promised_executors=planned.promised_executors,
        state=planned.state.value,
        requested_at=planned.requested_at,
    )


def make_event_item(event: ProvisioningEvent) -> EventItem:
    return EventItem(
        id=event.id,
        kind=event.kind.value,
        source_name=event.source_name,
        label=event.label,
        description=event.description,
        executors=event.executors,
        node_name=event.node_name,
        error_code=event.failure.error_code.value if event.failure and event.failure.error_code else None,
        reason=event.failure.reason if event.failure else None,
        occurred_at=event.occurred_at,
    )
