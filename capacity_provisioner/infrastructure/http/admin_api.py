from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status

from ...entities import (
    Actor,
    CapacitySourceNotFoundError,
    NodeNotFoundError,
    PermissionDeniedError,
    ProvisionRequestError,
)
from ...mediators.capacity_mediator import CapacityMediator
from ...utils.logging_utils import get_logger
from ._types import *

logger = get_logger()

ACTOR_HEADER = "X-Actor"


@dataclass
class AdminServices:
    capacity_mediator: CapacityMediator


def create_admin_api(services: AdminServices) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services = services
        yield

    app = FastAPI(
        title="Capacity provisioner administration API",
        lifespan=lifespan
    )

    def get_services(request: Request) -> AdminServices:
        return request.app.state.services

    def get_actor(x_actor: str = Header(..., alias=ACTOR_HEADER)) -> Actor:
        if not x_actor.strip():
            raise HTTPException(status_code=401, detail=f"Missing {ACTOR_HEADER} header")

        return Actor(x_actor.strip())

    def get_source_or_404(mediator: CapacityMediator, name: str):
        try:
            return mediator.get_source(name)
        except CapacitySourceNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.get("/status", response_model=StatusResponse)
    def get_status(svc: AdminServices = Depends(get_services)):
        mediator = svc.capacity_mediator

        return StatusResponse(
            sources=[make_source_item(source) for source in mediator.get_sources()],
            nodes=[make_node_item(node) for node in mediator.get_nodes()],
            outstanding=[make_planned_capacity_item(planned) for planned in mediator.get_outstanding()],
            promised=[
                PromiseItem(source_name=source_name, label=label, executors=executors)
                for (source_name, label), executors in mediator.get_promised_executors().items()
            ],
        )

    @app.get("/cloud/{name}", response_model=SourceDetailResponse)
    def get_source(name: str, svc: AdminServices = Depends(get_services)):
        mediator = svc.capacity_mediator
        source = get_source_or_404(mediator, name)

        return SourceDetailResponse(
            **make_source_item(source).model_dump(),
            nodes=[make_node_item(node) for node in mediator.get_nodes() if node.source_name == source.name],
            outstanding=[make_planned_capacity_item(planned) for planned in mediator.get_outstanding() if planned.source_name == source.name],
        )

    @app.post("/cloud/{name}/provision", response_model=list[PlannedCapacityItem], status_code=status.HTTP_202_ACCEPTED)
    def provision(
        name: str,
        body: ProvisionRequest,
        actor: Actor = Depends(get_actor),
        svc: AdminServices = Depends(get_services),
    ):
        try:
            planned = svc.capacity_mediator.provision(actor, name, body.label, body.excess_workload)
        except CapacitySourceNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PermissionDeniedError as e:
            raise HTTPException(status_code=403, detail=str(e))
        except ProvisionRequestError as e:
            raise HTTPException(status_code=502, detail=e.reason)

        logger.info(f"{actor.name} requested {body.excess_workload} executors for label {body.label} from {name}")

        return [make_planned_capacity_item(item) for item in planned]

    @app.delete("/nodes/{name}", response_model=NodeItem, status_code=status.HTTP_202_ACCEPTED)
    def remove_node(
        name: str,
        actor: Actor = Depends(get_actor),
        svc: AdminServices = Depends(get_services),
    ):
        try:
            node = svc.capacity_mediator.remove_node(actor, name)
        except NodeNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PermissionDeniedError as e:
            raise HTTPException(status_code=403, detail=str(e))

        logger.info(f"{actor.name} removed node {name}")

        return make_node_item(node)

    @app.put("/nodes/{name}/activity", response_model=NodeItem)
    def report_node_activity(
        name: str,
        body: NodeActivityRequest,
        actor: Actor = Depends(get_actor),
        svc: AdminServices = Depends(get_services),
    ):
        try:
            node = svc.capacity_mediator.report_node_activity(actor, name, body.busy_executors, body.pending_tasks)
        except NodeNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PermissionDeniedError as e:
            raise HTTPException(status_code=403, detail=str(e))

        logger.debug(f"{actor.name} reported {body.busy_executors} busy executor(s) and {body.pending_tasks} pending task(s) on node {name}")

        return make_node_item(node)

    @app.get("/events", response_model=list[EventItem])
    def list_events(
        limit: int = Query(100, ge=1, le=1000),
        svc: AdminServices = Depends(get_services),
    ):
        return [make_event_item(event) for event in svc.capacity_mediator.get_recent_events(limit)]

    return app
