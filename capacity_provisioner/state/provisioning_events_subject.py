from ..entities import Demand, Failure, Node, PlannedCapacity, ReleaseError
from ..utils.logging_utils import get_logger
from .provisioning_events_observer import ProvisioningEventsObserver


class ProvisioningEventsSubject:
    def __init__(self):
        self.observers: list[ProvisioningEventsObserver] = []

    def add_observer(self, observer: ProvisioningEventsObserver):
        """Registers a new observer to listen for provisioning events."""
        self.observers.append(observer)

    def remove_observer(self, observer: ProvisioningEventsObserver):
        """Removes an existing observer."""
        self.observers.remove(observer)

    def _notify(self, event_name: str, *args):
        for observer in self.observers:
            try:
                getattr(observer, event_name)(*args)
            except Exception as e:
                get_logger().error(f"Error notifying observer {type(observer).__name__} about {event_name}", exc_info=e)

    def notify_tick_started(self, tick: int):
        self._notify("on_tick_started", tick)

    def notify_tick_finished(self, tick: int, outstanding: int):
        self._notify("on_tick_finished", tick, outstanding)

    def notify_provision_requested(self, source_name: str, label: str | None, excess_workload: int):
        self._notify("on_provision_requested", source_name, label, excess_workload)

    def notify_capacity_planned(self, planned: PlannedCapacity):
        self._notify("on_capacity_planned", planned)

    def notify_provision_succeeded(self, planned: PlannedCapacity, node: Node):
        self._notify("on_provision_succeeded", planned, node)

    def notify_provision_failed(self, planned: PlannedCapacity, failure: Failure):
        self._notify("on_provision_failed", planned, failure)

    def notify_source_failed(self, source_name: str, failure: Failure):
        self._notify("on_source_failed", source_name, failure)

    def notify_unmet_demand(self, demand: Demand, remaining: int):
        self._notify("on_unmet_demand", demand, remaining)

    def notify_node_removed(self, node: Node, reason: str, release_error: ReleaseError | None):
        self._notify("on_node_removed", node, reason, release_error)
