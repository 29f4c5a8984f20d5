import threading

from ...entities import Node
from ...repositories import ClusterRegistry
from ...utils.logging_utils import get_logger


class InMemoryClusterRegistry(ClusterRegistry):
    """
    Thread safe registry keeping the live nodes by name.
    """

    def __init__(self, nodes: list[Node] | None = None):
        self._lock = threading.Lock()
        self._nodes: dict[str, Node] = {}

        for node in nodes or []:
            self.register_node(node)

    def register_node(self, node):
        with self._lock:
            if node.name in self._nodes:
                get_logger().debug(f"Node {node.name} is already registered")
                return False

            self._nodes[node.name] = node

        get_logger().debug(f"Node {node.name} registered")
        return True

    def remove_node(self, node_name):
        with self._lock:
            return self._nodes.pop(node_name, None)

    def get_node(self, node_name):
        with self._lock:
            return self._nodes.get(node_name)

    def get_nodes(self):
        with self._lock:
            return list(self._nodes.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def __contains__(self, node_name: str) -> bool:
        with self._lock:
            return node_name in self._nodes
