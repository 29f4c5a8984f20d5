import traceback
import uuid
from concurrent.futures import CancelledError, Future
from datetime import datetime, timedelta
from enum import Enum

from .exceptions import ProvisionCompletionError, ProvisionTimeoutError
from .node import Node


class PlannedCapacity:
    """
    Handle on one in-progress node creation returned by a capacity source.

    The completion is a single-resolution future yielding the `Node` or raising.
    The provisioning loop never blocks on it, it only advances the explicit `state` with `poll`.
    """

    class CompletionState(Enum):
        PENDING = "PENDING"
        SUCCEEDED = "SUCCEEDED"
        FAILED = "FAILED"
        TIMED_OUT = "TIMED_OUT"

    def __init__(self, description: str, promised_executors: int, completion: Future):
        if promised_executors < 0:
            raise ValueError(f"Invalid promised_executors value: {promised_executors}")

        self.id = uuid.uuid4().hex
        self.description = description
        self.promised_executors = promised_executors
        self.completion = completion

        # set once tracked by the provisioning loop
        self.source_name: str | None = None
        self.label: str | None = None
        self.requested_at: datetime | None = None

        self.state = PlannedCapacity.CompletionState.PENDING
        self.node: Node | None = None
        self.error: ProvisionCompletionError | None = None

    def track(self, source_name: str, label: str | None, requested_at: datetime):
        self.source_name = source_name
        self.label = label
        self.requested_at = requested_at

    def is_pending(self) -> bool:
        return self.state == PlannedCapacity.CompletionState.PENDING

    def poll(self, now: datetime, timeout: timedelta | None = None) -> CompletionState:
        if not self.is_pending():
            return self.state

        if self.completion.done():
            self._resolve()
        elif timeout is not None and self.requested_at is not None and now - self.requested_at >= timeout:
            self.state = PlannedCapacity.CompletionState.TIMED_OUT
            self.error = ProvisionTimeoutError(
                f"{self.description} did not complete within {timeout}",
                source_name=self.source_name,
                label=self.label,
            )

        return self.state

    def _resolve(self):
        try:
            node = self.completion.result(timeout=0)
        except CancelledError as exception:
            self._fail("node creation was cancelled", exception, None)
            return
        except Exception as exception:
            self._fail(f"node creation failed: {exception}", exception, "".join(traceback.format_exception(exception)))
            return

        if not isinstance(node, Node):
            self._fail(f"node creation returned {type(node).__name__} instead of a node", None, None)
            return

        self.node = node
        self.state = PlannedCapacity.CompletionState.SUCCEEDED

    def _fail(self, reason: str, exception: BaseException | None, exception_traceback: str | None):
        self.state = PlannedCapacity.CompletionState.FAILED
        self.error = ProvisionCompletionError(
            f"{self.description}: {reason}",
            source_name=self.source_name,
            label=self.label,
            original_exception=exception,
            original_exception_traceback=exception_traceback,
        )

    def __repr__(self) -> str:
        return f"PlannedCapacity(description={self.description!r}, promised_executors={self.promised_executors}, state={self.state.value})"
