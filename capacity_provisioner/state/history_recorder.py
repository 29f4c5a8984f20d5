from ..entities import Failure, ProvisioningEvent
from ..repositories import ProvisioningEventRepository
from .provisioning_events_observer import ProvisioningEventsObserver

Kind = ProvisioningEvent.Kind


class ProvisioningHistoryRecorder(ProvisioningEventsObserver):
    """
    Persists the provisioning decisions and outcomes, ticks are not recorded.
    """

    def __init__(self, event_repository: ProvisioningEventRepository):
        self.event_repository = event_repository

    def on_tick_started(self, tick):
        pass

    def on_tick_finished(self, tick, outstanding):
        pass

    def on_provision_requested(self, source_name, label, excess_workload):
        self.event_repository.save_event(ProvisioningEvent(Kind.REQUESTED, source_name=source_name, label=label, executors=excess_workload))

    def on_capacity_planned(self, planned):
        self.event_repository.save_event(ProvisioningEvent(
            Kind.PLANNED,
            source_name=planned.source_name,
            label=planned.label,
            description=planned.description,
            executors=planned.promised_executors,
        ))

    def on_provision_succeeded(self, planned, node):
        self.event_repository.save_event(ProvisioningEvent(
            Kind.SUCCEEDED,
            source_name=planned.source_name,
            label=planned.label,
            description=planned.description,
            executors=node.num_executors,
            node_name=node.name,
        ))

    def on_provision_failed(self, planned, failure):
        self.event_repository.save_event(ProvisioningEvent(
            Kind.FAILED,
            source_name=planned.source_name,
            label=planned.label,
            description=planned.description,
            executors=planned.promised_executors,
            failure=failure,
        ))

    def on_source_failed(self, source_name, failure):
        self.event_repository.save_event(ProvisioningEvent(Kind.SOURCE_FAILED, source_name=source_name, label=failure.label, failure=failure))

    def on_unmet_demand(self, demand, remaining):
        self.event_repository.save_event(ProvisioningEvent(Kind.UNMET_DEMAND, label=demand.label, executors=remaining))

    def on_node_removed(self, node, reason, release_error):
        if release_error is None:
            self.event_repository.save_event(ProvisioningEvent(
                Kind.NODE_REMOVED,
                source_name=node.source_name,
                description=reason,
                executors=node.num_executors,
                node_name=node.name,
            ))
        else:
            self.event_repository.save_event(ProvisioningEvent(
                Kind.RELEASE_FAILED,
                source_name=node.source_name,
                description=reason,
                executors=node.num_executors,
                node_name=node.name,
                failure=Failure(
                    source_name=node.source_name,
                    label=None,
                    error_code=release_error.error_type,
                    reason=release_error.reason,
                    exception=release_error.original_exception,
                    traceback=release_error.original_exception_traceback,
                    description=node.name,
                ),
            ))
