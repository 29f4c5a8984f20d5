import threading
import traceback
from concurrent.futures import Executor, Future
from datetime import datetime
from typing import Callable

from ..entities import Node, ReleaseError
from ..repositories import ClusterRegistry
from ..state.provisioning_events_subject import ProvisioningEventsSubject
from ..utils.logging_utils import get_logger

LATE_COMPLETION_REASON = "late-completion"
MANUAL_REASON = "manual"


class RetentionService:
    """
    Applies the retention policy of every registered node and removes the ones it rejects.

    Removal is done in two phases: the node is first detached from the registry so that no new
    work is assigned to it, then its external resource is released on `release_executor`,
    without waiting for it. A release failure never puts the node back.
    """

    def __init__(
        self,
        registry: ClusterRegistry,
        state_subject: ProvisioningEventsSubject,
        release_executor: Executor,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.registry = registry
        self.state_subject = state_subject
        self.release_executor = release_executor
        self.clock = clock

        self.release_failures: list[ReleaseError] = []
        self.release_failures_lock = threading.Lock()

    def check_nodes(self) -> list[Future]:
        now = self.clock()

        releases = []
        for node in self.registry.get_nodes():
            try:
                should_remove = node.retention_policy.should_remove(node, now)
            except Exception as e:
                get_logger().error(f"Retention policy {node.retention_policy} of node {node.name} failed, keeping the node", exc_info=e)
                continue

            if not should_remove:
                continue

            release = self.remove_node(node, node.retention_policy.reason)
            if release is not None:
                releases.append(release)

        return releases

    def remove_node(self, node: Node, reason: str) -> Future | None:
        """
        Returns the future of the release, or None if the node was not registered anymore.
        """
        if self.registry.remove_node(node.name) is None:
            get_logger().debug(f"Node {node.name} is already removed")
            return None

        get_logger().info(f"Node {node.name} detached from the cluster ({reason}), releasing its resources")
        return self.release_executor.submit(self._release, node, reason)

    def release_detached_node(self, node: Node) -> Future:
        """
        Release a node that never made it to the registry, like a completion arriving after its timeout.
        """
        return self.release_executor.submit(self._release, node, LATE_COMPLETION_REASON)

    def _release(self, node: Node, reason: str) -> ReleaseError | None:
        try:
            result = node.release_resources()
            if isinstance(result, Future):
                result.result()
        except Exception as e:
            error = ReleaseError(node.name, node.source_name, e, traceback.format_exc())
            with self.release_failures_lock:
                self.release_failures.append(error)

            self.state_subject.notify_node_removed(node, reason, error)
            return error

        self.state_subject.notify_node_removed(node, reason, None)
        return None

    def get_release_failures(self) -> list[ReleaseError]:
        with self.release_failures_lock:
            return self.release_failures.copy()
