import abc
import math
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Iterable

from ...entities import Node, PlannedCapacity, ProvisionRequestError, create_retention_policy
from ...services import CapacitySource
from ...utils.logging_utils import get_logger
from ...utils.unique_slug import generate_unique_coolname

logger = get_logger()


class NodePoolCapacitySource(CapacitySource, abc.ABC):
    """
    Capacity source launching identical nodes, each one with `executors_per_node` executors.

    Subclasses only know how to launch and terminate one node, the bookkeeping of the
    booting and live nodes (node names, node limit, retention) is done here.
    """

    def __init__(
            self,
            name: str,
            display_name: str | None = None,
            labels: Iterable[str] | None = None,
            executors_per_node: int = 1,
            max_nodes: int = 0,
            idle_timeout: float | None = None,
            executor: Executor | None = None,
        ):
        super().__init__(name, display_name)

        if executors_per_node < 1:
            raise ValueError(f"Invalid executors_per_node value: {executors_per_node}")
        if max_nodes < 0:
            raise ValueError(f"Invalid max_nodes value: {max_nodes}")

        self.labels = frozenset(labels or ())
        self.executors_per_node = executors_per_node
        self.max_nodes = max_nodes
        self.idle_timeout = idle_timeout

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(thread_name_prefix=f"{name}-launch")

        self._lock = threading.Lock()
        self._booting: set[str] = set()
        self._live: set[str] = set()

    @abc.abstractmethod
    def launch_node(self, node_name: str, label: str | None) -> Node:
        """
        Blocking creation of one node, executed in the launch executor.
        """
        pass

    @abc.abstractmethod
    def terminate_node(self, node: Node) -> None:
        """
        Blocking release of the external resource of a node, must tolerate an already released resource.
        """
        pass

    def can_provision(self, label):
        if label is None:
            return True

        return label in self.labels

    def get_node_names(self) -> set[str]:
        with self._lock:
            return self._booting | self._live

    def count_nodes(self) -> int:
        with self._lock:
            return len(self._booting) + len(self._live)

    def provision(self, label, excess_workload):
        wanted = math.ceil(excess_workload / self.executors_per_node)

        with self._lock:
            if self.max_nodes:
                available = self.max_nodes - len(self._booting) - len(self._live)
                if available < wanted:
                    logger.info(f"Capacity source {self.name} is limited to {self.max_nodes} nodes, launching {max(available, 0)} of the {wanted} wanted")
                wanted = max(0, min(wanted, available))

            node_names = []
            for _ in range(wanted):
                node_name = generate_unique_coolname(self._booting | self._live, prefix=self.name)
                self._booting.add(node_name)
                node_names.append(node_name)

        planned = []
        for index, node_name in enumerate(node_names):
            try:
                completion = self._executor.submit(self._launch, node_name, label)
            except RuntimeError as e:
                with self._lock:
                    self._booting.difference_update(node_names[index:])
                raise ProvisionRequestError(
                    f"Capacity source {self.name} is shut down",
                    source_name=self.name,
                    label=label,
                    original_exception=e,
                )

            planned.append(PlannedCapacity(f"{node_name} on {self.display_name}", self.executors_per_node, completion))

        return planned

    def _launch(self, node_name: str, label: str | None) -> Node:
        try:
            node = self.launch_node(node_name, label)
        except BaseException:
            with self._lock:
                self._booting.discard(node_name)
            raise

        with self._lock:
            self._booting.discard(node_name)
            self._live.add(node_name)

        return node

    def create_node(self, node_name: str, **kwargs) -> Node:
        return Node(
            node_name,
            num_executors=self.executors_per_node,
            labels=self.labels,
            source_name=self.name,
            retention_policy=create_retention_policy(self.idle_timeout),
            **kwargs,
        )

    def release(self, node: Node):
        self.terminate_node(node)

        with self._lock:
            self._live.discard(node.name)

        logger.debug(f"Node {node.name} of {self.name} released")

    def close(self):
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
