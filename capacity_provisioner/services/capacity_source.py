import abc
import re

from ..entities import PlannedCapacity

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


class CapacitySource(abc.ABC):
    """
    Creates nodes to dynamically expand the cluster.

    The provisioning loop performs the demand analysis, and when it determines that it really needs
    more capacity for a label, it calls `provision` on the sources that answered True to `can_provision`.

    Nodes created by a source are not released automatically: give them a `RetentionPolicy`,
    and a release handle remembering the external resource (instance id, container id, ...).
    """

    def __init__(self, name: str, display_name: str | None = None):
        """
        :param name: uniquely identifies the source among the configured ones.
            Short ID-like string, safe to use as an identifier and URL path token.
        """
        if not name or not NAME_PATTERN.match(name):
            raise ValueError(f"Invalid capacity source name: {name!r}")

        self._name = name
        self._display_name = display_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def display_name(self) -> str:
        return self._display_name or self._name

    @property
    def url(self) -> str:
        return f"cloud/{self._name}"

    @abc.abstractmethod
    def can_provision(self, label: str | None) -> bool:
        """
        Returns True if this source is capable of provisioning new nodes for the given label.

        Must be free of side effects, it is called on every tick for every unmet label.
        """
        pass

    @abc.abstractmethod
    def provision(self, label: str | None, excess_workload: int) -> list[PlannedCapacity]:
        """
        Asynchronously starts the creation of new nodes.

        Args:
            label (str | None): The label the new nodes need to have, None for untagged capacity.
                Only labels for which `can_provision` returned True are passed here.
            excess_workload (int): Number of executors needed to meet the current demand, always >= 1.
                If this is 3, the implementation may launch 3 nodes with 1 executor each, or 1 node with 3 executors, etc.

        Returns:
            list[PlannedCapacity]: The in-progress creations, can be empty but never None.
                The loop is responsible for adding the resulting nodes into the cluster registry.

        Raises:
            ProvisionRequestError: if the request could not be issued.
        """
        pass

    def close(self):
        """Release the resources held by the source itself, called on shutdown."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
