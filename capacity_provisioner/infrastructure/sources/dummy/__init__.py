from ._source import DummyCapacitySource as DummyCapacitySource
