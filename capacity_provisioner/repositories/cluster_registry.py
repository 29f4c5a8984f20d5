import abc

from ..entities import Node


class ClusterRegistry(abc.ABC):
    """
    Authoritative set of live nodes. The provisioner only mutates it through `register_node` and `remove_node`.
    """

    @abc.abstractmethod
    def register_node(self, node: Node) -> bool:
        """
        Add the node to the cluster.

        Returns False, without any change, when a node with the same name is already registered.
        """
        pass

    @abc.abstractmethod
    def remove_node(self, node_name: str) -> Node | None:
        """
        Detach the node from the cluster so that no new work is assigned to it.

        Returns the removed node, or None when it was not registered.
        """
        pass

    @abc.abstractmethod
    def get_node(self, node_name: str) -> Node | None:
        pass

    @abc.abstractmethod
    def get_nodes(self) -> list[Node]:
        pass

    def get_nodes_by_source(self, source_name: str) -> list[Node]:
        return [
            node
            for node in self.get_nodes()
            if node.source_name == source_name
        ]
