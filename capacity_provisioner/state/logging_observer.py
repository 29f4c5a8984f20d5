from ..entities.errors import NEW_RELIC_ALERT_FLAG
from ..utils.logging_utils import get_logger
from .provisioning_events_observer import ProvisioningEventsObserver

logger = get_logger()


def _format_label(label: str | None) -> str:
    return label if label is not None else "<untagged>"


class LoggingProvisioningObserver(ProvisioningEventsObserver):

    def on_tick_started(self, tick):
        logger.trace("Tick #%d started", tick)

    def on_tick_finished(self, tick, outstanding):
        logger.trace("Tick #%d finished, %d planned capacity(ies) in flight", tick, outstanding)

    def on_provision_requested(self, source_name, label, excess_workload):
        logger.info("Requesting %d executor(s) for label %s from %s", excess_workload, _format_label(label), source_name)

    def on_capacity_planned(self, planned):
        logger.debug("Planned %s promising %d executor(s) from %s", planned.description, planned.promised_executors, planned.source_name)

    def on_provision_succeeded(self, planned, node):
        logger.info("Node %s is online (%d executor(s), from %s)", node.name, node.num_executors, planned.source_name)

    def on_provision_failed(self, planned, failure):
        logger.warning("Provisioning of %s from %s failed: [%s] %s", planned.description, planned.source_name, failure.error_code.value, failure.reason)

    def on_source_failed(self, source_name, failure):
        logger.error("Capacity source %s failed for label %s: %s", source_name, _format_label(failure.label), failure.reason, exc_info=failure.exception if isinstance(failure.exception, BaseException) else None)

    def on_unmet_demand(self, demand, remaining):
        logger.warning("No capacity source can provision label %s, %d executor(s) remain unmet", _format_label(demand.label), remaining)

    def on_node_removed(self, node, reason, release_error):
        if release_error is None:
            logger.info("Node %s removed (%s), resources released", node.name, reason)
        else:
            logger.error(f"{NEW_RELIC_ALERT_FLAG} Node %s removed (%s) but its resources could not be released, they may have leaked: %s", node.name, reason, release_error.original_exception)
