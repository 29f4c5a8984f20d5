import threading
from datetime import datetime, timedelta
from typing import Callable, Iterable

from ...entities import CapacitySourceNotFoundError, Demand, Node, PlannedCapacity, ProvisionRequestError
from ...repositories import ClusterRegistry, DemandRepository
from ...state.provisioning_events_subject import ProvisioningEventsSubject
from ...utils.logging_utils import get_logger
from ..capacity_source import CapacitySource
from .completion import _CompletionService
from .ledger import LedgerKey, ProvisioningLedger
from .request import _RequestService


class ProvisioningLoop:
    """
    Periodic control loop matching the demand with the capacity sources.

    On every tick, the outstanding planned capacities are polled first: the completed nodes are
    registered and the ledger is cleared. Then each unmet demand is compared with the executors
    already promised for its label, and the sources are asked for the remaining executors in
    configuration order, until enough is promised.

    Ticks and manual requests are serialized by `lock`, the ledger is never accessed outside of it.
    """

    def __init__(
        self,
        sources: Iterable[CapacitySource],
        registry: ClusterRegistry,
        demand_repository: DemandRepository,
        state_subject: ProvisioningEventsSubject,
        completion_timeout: float | None = None,
        discard_node: Callable[[Node], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.sources = list(sources)
        self._check_unique_names(self.sources)

        self.registry = registry
        self.demand_repository = demand_repository
        self.state_subject = state_subject
        self.clock = clock

        self.ledger = ProvisioningLedger()
        self.outstanding: dict[str, PlannedCapacity] = {}
        self.tick_count = 0

        self.request_service = _RequestService(
            self.sources,
            self.ledger,
            self.outstanding,
            state_subject,
        )

        self.completion_service = _CompletionService(
            registry,
            self.ledger,
            self.outstanding,
            state_subject,
            timedelta(seconds=completion_timeout) if completion_timeout else None,
            discard_node,
        )

        self.lock = threading.Lock()

    @staticmethod
    def _check_unique_names(sources: list[CapacitySource]):
        names = set()
        for source in sources:
            if source.name in names:
                raise ValueError(f"Duplicate capacity source name: {source.name}")
            names.add(source.name)

    def get_source(self, source_name: str) -> CapacitySource:
        for source in self.sources:
            if source.name == source_name:
                return source

        raise CapacitySourceNotFoundError(source_name)

    def tick(self):
        with self.lock:
            self.tick_count += 1
            tick = self.tick_count
            now = self.clock()

            self.state_subject.notify_tick_started(tick)

            self.completion_service.poll_all(now)

            for demand in self._load_demands():
                if not demand.is_unmet():
                    continue

                self.request_service.evaluate_demand(demand, now)

            self.state_subject.notify_tick_finished(tick, len(self.outstanding))

    def _load_demands(self) -> list[Demand]:
        try:
            demands = self.demand_repository.load()
        except Exception as e:
            get_logger().error("Could not load the demand, no capacity will be requested this tick", exc_info=e)
            return []

        get_logger().trace(f"Loaded demand: {demands}")
        return demands

    def provision(self, source_name: str, label: str | None, excess_workload: int) -> list[PlannedCapacity]:
        """
        Request capacity from a specific source, outside of the demand evaluation.

        Raises ProvisionRequestError if the source rejects the request.
        """
        if excess_workload < 1:
            raise ValueError(f"Invalid excess_workload value: {excess_workload}")

        source = self.get_source(source_name)

        with self.lock:
            try:
                return self.request_service.request(source, label, excess_workload, self.clock())
            except ProvisionRequestError as e:
                self.request_service.report_source_failure(source, e)
                raise

    def get_outstanding(self) -> list[PlannedCapacity]:
        with self.lock:
            return list(self.outstanding.values())

    def get_ledger_snapshot(self) -> dict[LedgerKey, int]:
        with self.lock:
            return self.ledger.snapshot()
