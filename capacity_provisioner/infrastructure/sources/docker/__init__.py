from ._source import DockerCapacitySource as DockerCapacitySource
