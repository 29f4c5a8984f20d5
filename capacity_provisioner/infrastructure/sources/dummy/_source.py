import threading

from ....entities import Node
from ....utils.logging_utils import get_logger
from .._base import NodePoolCapacitySource

logger = get_logger()


class DummyCapacitySource(NodePoolCapacitySource):
    """Capacity source creating in-memory nodes, for testing and local runs."""

    def __init__(self, *args, boot_delay: float = 0, **kwargs):
        super().__init__(*args, **kwargs)

        self.boot_delay = boot_delay
        self._closing = threading.Event()
        self.released_node_names: list[str] = []

    def launch_node(self, node_name, label):
        if self.boot_delay and self._closing.wait(self.boot_delay):
            raise RuntimeError(f"Capacity source {self.name} closed while {node_name} was booting")

        logger.debug(f"Dummy node {node_name} is up for label {label}")

        node = self.create_node(node_name)
        node.release = lambda: self.release(node)

        return node

    def terminate_node(self, node: Node):
        self.released_node_names.append(node.name)

    def close(self):
        self._closing.set()
        super().close()
