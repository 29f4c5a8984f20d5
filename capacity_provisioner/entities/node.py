from datetime import datetime, timedelta
from typing import Any, Callable, Iterable

from .retention_policy import AlwaysRetainPolicy, RetentionPolicy

ReleaseHandle = Callable[[], Any]


class Node:
    """
    A worker node brought online by a capacity source.
    """

    def __init__(
            self,
            name: str,
            num_executors: int = 1,
            labels: Iterable[str] | None = None,
            source_name: str | None = None,
            retention_policy: RetentionPolicy | None = None,
            release: ReleaseHandle | None = None,
            created_at: datetime | None = None,
        ):
        """
        :param name: unique name of the node in the cluster registry.
        :param num_executors: number of jobs the node can execute concurrently.
        :param labels: labels the node satisfies, an untagged demand can be served by any node.
        :param source_name: name of the capacity source which provisioned the node.
        :param retention_policy: strategy deciding when the node is torn down, kept forever by default.
        :param release: provider specific handle freeing the external resource (VM, container, ...).
            It may return a `concurrent.futures.Future` when the release is asynchronous.
            The node owns it because the planned capacity which created the node is gone by the time it is removed.
        """
        if not name or name.strip() == "":
            raise ValueError(f"Invalid name value: {name!r}")
        if num_executors < 1:
            raise ValueError(f"Invalid num_executors value: {num_executors}")

        self.name = name
        self.num_executors = num_executors
        self.labels = frozenset(labels or ())
        self.source_name = source_name
        self.retention_policy = retention_policy if retention_policy else AlwaysRetainPolicy()
        self.release = release
        self.created_at = created_at if created_at else datetime.now()

        self.busy_executors = 0
        self.pending_tasks = 0
        self.idle_since: datetime | None = self.created_at

    def has_label(self, label: str | None) -> bool:
        return label is None or label in self.labels

    def is_idle(self) -> bool:
        return self.busy_executors == 0

    def idle_duration(self, now: datetime) -> timedelta:
        if not self.is_idle() or self.idle_since is None:
            return timedelta(0)

        return now - self.idle_since

    def mark_busy(self, executors: int = 1):
        self.busy_executors = min(self.num_executors, self.busy_executors + executors)
        self.idle_since = None

    def mark_idle(self, executors: int = 1, now: datetime | None = None):
        self.busy_executors = max(0, self.busy_executors - executors)
        if self.busy_executors == 0 and self.idle_since is None:
            self.idle_since = now if now else datetime.now()

    def report_activity(self, busy_executors: int, pending_tasks: int = 0, now: datetime | None = None):
        """
        Replace the activity counters with the ones observed by the scheduler.

        The idle clock keeps running while the node stays idle between two reports.
        """
        if busy_executors < 0:
            raise ValueError(f"Invalid busy_executors value: {busy_executors}")
        if pending_tasks < 0:
            raise ValueError(f"Invalid pending_tasks value: {pending_tasks}")

        self.pending_tasks = pending_tasks

        if busy_executors > 0:
            self.busy_executors = min(self.num_executors, busy_executors)
            self.idle_since = None
        else:
            self.mark_idle(self.busy_executors, now)

    def release_resources(self):
        if self.release is None:
            return None

        return self.release()

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, source_name={self.source_name!r}, executors={self.num_executors}, labels={sorted(self.labels)})"
