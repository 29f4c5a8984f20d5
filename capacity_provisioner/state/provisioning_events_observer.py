import abc

from ..entities import Demand, Failure, Node, PlannedCapacity, ReleaseError


class ProvisioningEventsObserver(abc.ABC):
    """Interface for observing the provisioning and deprovisioning of capacity."""

    @abc.abstractmethod
    def on_tick_started(self, tick: int):
        pass

    @abc.abstractmethod
    def on_tick_finished(self, tick: int, outstanding: int):
        """Called at the end of a tick with the number of planned capacities still in flight."""
        pass

    @abc.abstractmethod
    def on_provision_requested(self, source_name: str, label: str | None, excess_workload: int):
        pass

    @abc.abstractmethod
    def on_capacity_planned(self, planned: PlannedCapacity):
        pass

    @abc.abstractmethod
    def on_provision_succeeded(self, planned: PlannedCapacity, node: Node):
        pass

    @abc.abstractmethod
    def on_provision_failed(self, planned: PlannedCapacity, failure: Failure):
        pass

    @abc.abstractmethod
    def on_source_failed(self, source_name: str, failure: Failure):
        """Called when `can_provision` or `provision` itself failed."""
        pass

    @abc.abstractmethod
    def on_unmet_demand(self, demand: Demand, remaining: int):
        """Called when no source is able to provision the label."""
        pass

    @abc.abstractmethod
    def on_node_removed(self, node: Node, reason: str, release_error: ReleaseError | None):
        pass
