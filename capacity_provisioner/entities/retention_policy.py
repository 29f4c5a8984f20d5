import abc
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .node import Node


class RetentionPolicy(abc.ABC):
    """Decides when a provisioned node should be torn down."""

    reason = "retention"

    @abc.abstractmethod
    def should_remove(self, node: "Node", now: datetime) -> bool:
        pass


class AlwaysRetainPolicy(RetentionPolicy):
    """Keeps the node until it is removed manually."""

    reason = "never"

    def should_remove(self, node, now):
        return False

    def __repr__(self) -> str:
        return "AlwaysRetainPolicy()"


class IdleTimeoutRetentionPolicy(RetentionPolicy):
    """
    Removes a node once it has been idle, with no pending task, for at least `idle_timeout`.
    """

    reason = "idle-timeout"

    def __init__(self, idle_timeout: timedelta):
        if idle_timeout <= timedelta(0):
            raise ValueError(f"Invalid idle_timeout value: {idle_timeout}")

        self.idle_timeout = idle_timeout

    def should_remove(self, node, now):
        if not node.is_idle() or node.pending_tasks > 0:
            return False

        return node.idle_duration(now) >= self.idle_timeout

    def __repr__(self) -> str:
        return f"IdleTimeoutRetentionPolicy(idle_timeout={self.idle_timeout})"


def create_retention_policy(idle_timeout_seconds: float | None) -> RetentionPolicy:
    if not idle_timeout_seconds:
        return AlwaysRetainPolicy()

    return IdleTimeoutRetentionPolicy(timedelta(seconds=idle_timeout_seconds))
