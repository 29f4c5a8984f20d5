from typing import Dict, Optional

import docker.errors
from docker import DockerClient

from ....entities import Node
from ....utils.logging_utils import get_logger
from .._base import NodePoolCapacitySource

logger = get_logger()

SOURCE_LABEL = "capacity-provisioner.source"
NODE_LABEL = "capacity-provisioner.label"


class DockerCapacitySource(NodePoolCapacitySource):
    """
    Capacity source running one container per node, on the local Docker daemon.
    """

    def __init__(
            self,
            *args,
            image: str,
            docker_client: Optional[DockerClient] = None,
            docker_network_name: Optional[str] = None,
            environment: Optional[Dict[str, str]] = None,
            stop_timeout: int = 10,
            **kwargs,
        ):
        super().__init__(*args, **kwargs)

        self.image = image
        self._docker_client = docker_client or DockerClient.from_env()
        self._docker_network_name = docker_network_name
        self._environment = environment or {}
        self._stop_timeout = stop_timeout

        self._container_ids: dict[str, str] = {}

    def launch_node(self, node_name, label):
        get_logger().debug("Starting node %s from image %s with network %s", node_name, self.image, self._docker_network_name)

        try:
            existing_container = self._docker_client.containers.get(node_name)
            get_logger().debug("Container %s already exists, stopping and removing it.", node_name)
            existing_container.stop(timeout=0)
            existing_container.remove()
        except docker.errors.NotFound:
            pass

        container = self._docker_client.containers.run(
            image=self.image,
            name=node_name,
            detach=True,
            labels={
                SOURCE_LABEL: self.name,
                NODE_LABEL: label or "",
            },
            environment={
                **self._environment,
                "NODE_NAME": node_name,
                "NODE_EXECUTORS": str(self.executors_per_node),
            },
            network=self._docker_network_name,
        )

        self._container_ids[node_name] = container.id

        node = self.create_node(node_name)
        node.release = lambda: self.release(node)

        return node

    def terminate_node(self, node: Node):
        container_id = self._container_ids.pop(node.name, node.name)

        try:
            container = self._docker_client.containers.get(container_id)
        except docker.errors.NotFound:
            logger.warning(f"Container {container_id} of node {node.name} is already gone")
            return

        try:
            container.stop(timeout=self._stop_timeout)
        except docker.errors.NotFound:
            logger.warning(f"Container {container_id} of node {node.name} disappeared while stopping")
            return

        try:
            container.remove()
        except docker.errors.NotFound:
            pass
