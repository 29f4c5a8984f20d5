from concurrent.futures import Future
from datetime import datetime, timedelta
from typing import Callable

from ...entities import Failure, Node, PlannedCapacity
from ...repositories import ClusterRegistry
from ...state.provisioning_events_subject import ProvisioningEventsSubject
from ...utils.logging_utils import get_logger
from .ledger import ProvisioningLedger

CompletionState = PlannedCapacity.CompletionState


# Never use this class outside ProvisioningLoop
class _CompletionService:

    def __init__(self,
                 registry: ClusterRegistry,
                 ledger: ProvisioningLedger,
                 outstanding: dict[str, PlannedCapacity],
                 state_subject: ProvisioningEventsSubject,
                 completion_timeout: timedelta | None,
                 discard_node: Callable[[Node], None] | None):
        self.registry = registry
        self.ledger = ledger
        self.outstanding = outstanding
        self.state_subject = state_subject
        self.completion_timeout = completion_timeout
        self.discard_node = discard_node

    def poll_all(self, now: datetime):
        for planned in list(self.outstanding.values()):
            state = planned.poll(now, self.completion_timeout)
            if state == CompletionState.PENDING:
                continue

            self.resolve(planned)

    def resolve(self, planned: PlannedCapacity) -> bool:
        """
        Merge the outcome of a planned capacity that is no longer pending.

        Returns False when it was already resolved.
        """
        if self.outstanding.pop(planned.id, None) is None:
            get_logger().debug(f"{planned} already resolved, ignoring it")
            return False

        self.ledger.clear(planned)

        if planned.state == CompletionState.SUCCEEDED:
            self._merge(planned)
        elif planned.state in (CompletionState.FAILED, CompletionState.TIMED_OUT):
            self.state_subject.notify_provision_failed(planned, Failure.from_error(planned.error, planned.description))

            if planned.state == CompletionState.TIMED_OUT:
                planned.completion.add_done_callback(lambda future: self._on_late_completion(planned, future))
        else:
            raise ValueError(f"Cannot resolve {planned} in state {planned.state}")

        return True

    def _merge(self, planned: PlannedCapacity):
        node = planned.node
        if node.source_name is None:
            node.source_name = planned.source_name

        if not self.registry.register_node(node):
            if self.registry.get_node(node.name) is node:
                get_logger().warning(f"Node {node.name} from {planned.source_name} is already registered, ignoring the duplicate")
                return

            get_logger().warning(f"Another node is registered as {node.name}, discarding the one from {planned.source_name}")
            self._discard(node)
            return

        self.state_subject.notify_provision_succeeded(planned, node)

    def _on_late_completion(self, planned: PlannedCapacity, future: Future):
        if future.cancelled() or future.exception() is not None:
            get_logger().debug(f"Timed out {planned} finally failed")
            return

        node = future.result()
        get_logger().warning(f"Timed out {planned} completed late with node {node}, discarding it")

        if isinstance(node, Node):
            if node.source_name is None:
                node.source_name = planned.source_name
            self._discard(node)

    def _discard(self, node: Node):
        if self.discard_node is None:
            get_logger().error(f"Node {node.name} from {node.source_name} cannot be discarded, its resource is leaked")
            return

        self.discard_node(node)
