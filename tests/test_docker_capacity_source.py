from concurrent.futures import Future
from unittest.mock import MagicMock

import docker.errors
import pytest
from docker import DockerClient

from capacity_provisioner.infrastructure.sources.docker import DockerCapacitySource
from capacity_provisioner.infrastructure.sources.docker._source import NODE_LABEL, SOURCE_LABEL


class ImmediateExecutor:
    """Runs the launches in the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def docker_client():
    client = MagicMock(spec=DockerClient)
    client.containers = MagicMock()
    client.containers.get.side_effect = docker.errors.NotFound("No such container")
    client.containers.run.return_value = MagicMock(id="container-id")
    return client


@pytest.fixture
def source(docker_client):
    return DockerCapacitySource(
        "docker-gpu",
        labels=["gpu"],
        executors_per_node=2,
        image="worker:latest",
        docker_client=docker_client,
        docker_network_name="provisioner",
        environment={"CONTROLLER_URL": "http://controller"},
        stop_timeout=5,
        executor=ImmediateExecutor(),
    )


class TestDockerCapacitySource:

    def test_launches_one_container_per_node(self, source, docker_client):
        planned = source.provision("gpu", 2)

        assert len(planned) == 1
        node = planned[0].completion.result()

        kwargs = docker_client.containers.run.call_args.kwargs
        assert kwargs["image"] == "worker:latest"
        assert kwargs["name"] == node.name
        assert kwargs["detach"] is True
        assert kwargs["network"] == "provisioner"
        assert kwargs["labels"] == {SOURCE_LABEL: "docker-gpu", NODE_LABEL: "gpu"}
        assert kwargs["environment"]["CONTROLLER_URL"] == "http://controller"
        assert kwargs["environment"]["NODE_NAME"] == node.name
        assert kwargs["environment"]["NODE_EXECUTORS"] == "2"

        assert node.source_name == "docker-gpu"
        assert node.num_executors == 2

    def test_failed_launch_fails_the_completion(self, source, docker_client):
        docker_client.containers.run.side_effect = docker.errors.APIError("image not found")

        planned = source.provision("gpu", 1)

        with pytest.raises(docker.errors.APIError):
            planned[0].completion.result()
        assert source.count_nodes() == 0

    def test_release_stops_and_removes_the_container(self, source, docker_client):
        node = source.provision("gpu", 1)[0].completion.result()

        container = MagicMock()
        docker_client.containers.get.side_effect = None
        docker_client.containers.get.return_value = container

        node.release_resources()

        docker_client.containers.get.assert_called_with("container-id")
        container.stop.assert_called_once_with(timeout=5)
        container.remove.assert_called_once_with()
        assert source.count_nodes() == 0

    def test_release_of_a_vanished_container(self, source, docker_client):
        node = source.provision("gpu", 1)[0].completion.result()

        node.release_resources()

        assert source.count_nodes() == 0

    def test_release_error_is_raised(self, source, docker_client):
        node = source.provision("gpu", 1)[0].completion.result()

        container = MagicMock()
        container.stop.side_effect = docker.errors.APIError("daemon unreachable")
        docker_client.containers.get.side_effect = None
        docker_client.containers.get.return_value = container

        with pytest.raises(docker.errors.APIError):
            node.release_resources()
