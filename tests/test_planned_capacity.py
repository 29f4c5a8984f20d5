from concurrent.futures import Future
from datetime import datetime, timedelta

import pytest

from capacity_provisioner.entities import (
    Node,
    PlannedCapacity,
    ProvisionCompletionError,
    ProvisionTimeoutError,
)

State = PlannedCapacity.CompletionState
REQUESTED_AT = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def planned():
    capacity = PlannedCapacity("node on test", 2, Future())
    capacity.track("test", "gpu", REQUESTED_AT)
    return capacity


class TestPoll:

    def test_pending_while_not_done(self, planned):
        assert planned.poll(REQUESTED_AT + timedelta(hours=1)) == State.PENDING
        assert planned.is_pending()

    def test_succeeds_with_node(self, planned):
        node = Node("node-1", num_executors=2)
        planned.completion.set_result(node)

        assert planned.poll(REQUESTED_AT) == State.SUCCEEDED
        assert planned.node is node
        assert planned.error is None

    def test_exception_becomes_completion_error(self, planned):
        planned.completion.set_exception(RuntimeError("instance crashed"))

        assert planned.poll(REQUESTED_AT) == State.FAILED
        assert isinstance(planned.error, ProvisionCompletionError)
        assert isinstance(planned.error.original_exception, RuntimeError)
        assert planned.error.source_name == "test"
        assert planned.error.label == "gpu"
        assert "instance crashed" in planned.error.original_exception_traceback

    def test_cancelled_completion_fails(self, planned):
        planned.completion.cancel()

        assert planned.poll(REQUESTED_AT) == State.FAILED

    def test_unexpected_result_fails(self, planned):
        planned.completion.set_result("not a node")

        assert planned.poll(REQUESTED_AT) == State.FAILED
        assert planned.node is None

    def test_times_out(self, planned):
        timeout = timedelta(minutes=5)

        assert planned.poll(REQUESTED_AT + timedelta(minutes=4), timeout) == State.PENDING
        assert planned.poll(REQUESTED_AT + timedelta(minutes=5), timeout) == State.TIMED_OUT
        assert isinstance(planned.error, ProvisionTimeoutError)
        assert isinstance(planned.error, ProvisionCompletionError)

    def test_resolution_is_final(self, planned):
        planned.completion.set_exception(RuntimeError("boom"))
        planned.poll(REQUESTED_AT)

        assert planned.poll(REQUESTED_AT + timedelta(hours=1), timedelta(seconds=1)) == State.FAILED

    def test_negative_promise_is_rejected(self):
        with pytest.raises(ValueError):
            PlannedCapacity("node", -1, Future())
