import threading

from ...entities import Demand
from ...repositories import ClusterRegistry, DemandRepository
from ._free_executors import deduct_free_executors


class StaticDemandRepository(DemandRepository):
    """
    Demand pushed in process, by an embedding scheduler or from the configuration.

    When a registry is given, the workload is what is queued per label and the free executors
    of the registered nodes are deducted on every load. Otherwise it is reported as is.
    """

    def __init__(self, demands: list[Demand] | None = None, registry: ClusterRegistry | None = None):
        self._lock = threading.Lock()
        self._demands: dict[str | None, Demand] = {}
        self.registry = registry

        for demand in demands or []:
            self.set_demand(demand.label, demand.excess_workload)

    def set_demand(self, label: str | None, excess_workload: int):
        demand = Demand(label, excess_workload)
        with self._lock:
            self._demands[label] = demand

    def clear(self):
        with self._lock:
            self._demands.clear()

    def load(self):
        with self._lock:
            demands = list(self._demands.values())

        return deduct_free_executors(demands, self.registry)
