from typing import Callable

from ...configuration import CapacitySourceConfig, RetentionConfig
from ...services import CapacitySource
from ._base import NodePoolCapacitySource as NodePoolCapacitySource


def _create_dummy_source(config, **kwargs) -> CapacitySource:
    from .dummy import DummyCapacitySource

    return DummyCapacitySource(boot_delay=config.boot_delay, **kwargs)


def _create_docker_source(config, **kwargs) -> CapacitySource:
    from .docker import DockerCapacitySource

    return DockerCapacitySource(
        image=config.image,
        docker_network_name=config.docker_network_name,
        environment=config.environment,
        stop_timeout=config.stop_timeout,
        **kwargs,
    )


providers: dict[str, Callable[..., CapacitySource]] = {
    "dummy": _create_dummy_source,
    "docker": _create_docker_source,
}


def create_capacity_source(config: CapacitySourceConfig, retention_config: RetentionConfig) -> CapacitySource:
    try:
        factory = providers[config.type]
    except KeyError:
        raise ValueError(f"Unsupported capacity source type: {config.type}")

    idle_timeout = config.idle_timeout if config.idle_timeout is not None else retention_config.idle_timeout

    return factory(
        config,
        name=config.name,
        display_name=config.display_name,
        labels=config.labels,
        executors_per_node=config.executors_per_node,
        max_nodes=config.max_nodes,
        idle_timeout=idle_timeout,
    )
