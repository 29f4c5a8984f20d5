from ...entities import Demand
from ...repositories import ClusterRegistry


def count_free_executors(registry: ClusterRegistry, label: str | None) -> int:
    return sum(
        node.num_executors - node.busy_executors
        for node in registry.get_nodes()
        if node.has_label(label)
    )


def deduct_free_executors(demands: list[Demand], registry: ClusterRegistry | None) -> list[Demand]:
    """
    Turn the workload queued per label into the excess the cluster cannot absorb.

    A node carrying several labels counts for each of them.
    """
    if registry is None:
        return demands

    return [
        Demand(demand.label, max(0, demand.excess_workload - count_free_executors(registry, demand.label)))
        for demand in demands
    ]
