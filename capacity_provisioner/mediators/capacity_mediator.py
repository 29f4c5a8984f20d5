from ..entities import Actor, Node, NodeNotFoundError, Permission, PlannedCapacity, ProvisioningEvent
from ..entities.permission import ANY_SOURCE
from ..repositories import ClusterRegistry, ProvisioningEventRepository
from ..services import AccessGuard, CapacitySource, RetentionService
from ..services.provisioning import ProvisioningLoop
from ..services.retention_service import MANUAL_REASON


class CapacityMediator:
    """
    Entry point of the actor initiated operations, every one of them is checked by the access guard.
    """

    def __init__(
        self,
        provisioning_loop: ProvisioningLoop,
        retention_service: RetentionService,
        registry: ClusterRegistry,
        access_guard: AccessGuard,
        event_repository: ProvisioningEventRepository | None = None,
    ):
        self.provisioning_loop = provisioning_loop
        self.retention_service = retention_service
        self.registry = registry
        self.access_guard = access_guard
        self.event_repository = event_repository

    def get_sources(self) -> list[CapacitySource]:
        return list(self.provisioning_loop.sources)

    def get_source(self, source_name: str) -> CapacitySource:
        return self.provisioning_loop.get_source(source_name)

    def get_nodes(self) -> list[Node]:
        return sorted(self.registry.get_nodes(), key=lambda node: node.name)

    def get_outstanding(self) -> list[PlannedCapacity]:
        return self.provisioning_loop.get_outstanding()

    def get_promised_executors(self) -> dict[tuple[str, str | None], int]:
        return self.provisioning_loop.get_ledger_snapshot()

    def get_recent_events(self, limit: int = 100) -> list[ProvisioningEvent]:
        if self.event_repository is None:
            return []

        return self.event_repository.load_recent(limit)

    def provision(self, actor: Actor, source_name: str, label: str | None, excess_workload: int) -> list[PlannedCapacity]:
        source = self.provisioning_loop.get_source(source_name)
        self.access_guard.check_permission(actor, Permission.PROVISION, source)

        return self.provisioning_loop.provision(source.name, label, excess_workload)

    def remove_node(self, actor: Actor, node_name: str) -> Node:
        node = self._get_node_checked(actor, node_name)

        if self.retention_service.remove_node(node, MANUAL_REASON) is None:
            # removed concurrently, by the retention check or another actor
            raise NodeNotFoundError(node_name)

        return node

    def report_node_activity(self, actor: Actor, node_name: str, busy_executors: int, pending_tasks: int = 0) -> Node:
        node = self._get_node_checked(actor, node_name)
        node.report_activity(busy_executors, pending_tasks)

        return node

    def _get_node_checked(self, actor: Actor, node_name: str) -> Node:
        node = self.registry.get_node(node_name)
        if node is None:
            raise NodeNotFoundError(node_name)

        # a node without source requires a grant on every source
        self.access_guard.check_permission(actor, Permission.PROVISION, node.source_name or ANY_SOURCE)

        return node
