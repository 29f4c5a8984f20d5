import traceback
from datetime import datetime

from ...entities import Demand, Failure, PlannedCapacity, ProvisionRequestError
from ...state.provisioning_events_subject import ProvisioningEventsSubject
from ...utils.logging_utils import get_logger
from ..capacity_source import CapacitySource
from .ledger import ProvisioningLedger


# Never use this class outside ProvisioningLoop
class _RequestService:

    def __init__(self,
                 sources: list[CapacitySource],
                 ledger: ProvisioningLedger,
                 outstanding: dict[str, PlannedCapacity],
                 state_subject: ProvisioningEventsSubject):
        self.sources = sources
        self.ledger = ledger
        self.outstanding = outstanding
        self.state_subject = state_subject

    def evaluate_demand(self, demand: Demand, now: datetime) -> list[PlannedCapacity]:
        label = demand.label

        already_promised = self.ledger.promised_for_label(label)
        remaining = max(0, demand.excess_workload - already_promised)
        if remaining == 0:
            get_logger().trace(f"Demand for label {label} ({demand.excess_workload}) is covered by {already_promised} executor(s) in flight")
            return []

        candidates = self._capable_sources(label)
        if not candidates:
            self.state_subject.notify_unmet_demand(demand, remaining)
            return []

        planned_capacities: list[PlannedCapacity] = []
        promised_this_tick = 0
        for source in candidates:
            if promised_this_tick >= remaining:
                get_logger().trace(f"Demand for label {label} is covered, {source.name} is not requested")
                break

            try:
                planned = self.request(source, label, remaining - promised_this_tick, now)
            except ProvisionRequestError as e:
                self.report_source_failure(source, e)
                continue

            promised_this_tick += sum(capacity.promised_executors for capacity in planned)
            planned_capacities.extend(planned)

        return planned_capacities

    def request(self, source: CapacitySource, label: str | None, excess_workload: int, now: datetime) -> list[PlannedCapacity]:
        self.state_subject.notify_provision_requested(source.name, label, excess_workload)

        try:
            planned = source.provision(label, excess_workload)
        except ProvisionRequestError as e:
            e.source_name = e.source_name or source.name
            e.label = e.label if e.label is not None else label
            raise
        except Exception as e:
            raise ProvisionRequestError(
                f"provision failed: {e}",
                source_name=source.name,
                label=label,
                original_exception=e,
                original_exception_traceback=traceback.format_exc(),
            ) from e

        planned = self._check_planned(source, label, planned)
        get_logger().debug(f"{source.name} planned {len(planned)} capacity(ies) for label {label}")

        for capacity in planned:
            self._track(source, label, capacity, now)

        return planned

    @staticmethod
    def _check_planned(source: CapacitySource, label: str | None, planned) -> list[PlannedCapacity]:
        # nothing is tracked unless the whole list is valid
        if planned is None:
            raise ProvisionRequestError("provision returned None instead of a list", source_name=source.name, label=label)

        try:
            planned = list(planned)
        except TypeError as e:
            raise ProvisionRequestError(
                f"provision returned a non iterable {type(planned).__name__}",
                source_name=source.name,
                label=label,
                original_exception=e,
            ) from e

        for capacity in planned:
            if not isinstance(capacity, PlannedCapacity):
                raise ProvisionRequestError(
                    f"provision returned a {type(capacity).__name__} instead of a PlannedCapacity",
                    source_name=source.name,
                    label=label,
                )

        return planned

    def _track(self, source: CapacitySource, label: str | None, planned: PlannedCapacity, now: datetime):
        if planned.id in self.outstanding:
            get_logger().warning(f"{source.name} returned the already tracked {planned}, ignoring it")
            return

        planned.track(source.name, label, now)
        self.ledger.record(planned)
        self.outstanding[planned.id] = planned

        self.state_subject.notify_capacity_planned(planned)

    def _capable_sources(self, label: str | None) -> list[CapacitySource]:
        capable = []
        for source in self.sources:
            try:
                if source.can_provision(label):
                    capable.append(source)
            except Exception as e:
                self.report_source_failure(source, ProvisionRequestError(
                    f"can_provision failed: {e}",
                    source_name=source.name,
                    label=label,
                    original_exception=e,
                    original_exception_traceback=traceback.format_exc(),
                ))

        return capable

    def report_source_failure(self, source: CapacitySource, error: ProvisionRequestError):
        self.state_subject.notify_source_failed(source.name, Failure.from_error(error))
