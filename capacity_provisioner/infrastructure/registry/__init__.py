from ._in_memory import InMemoryClusterRegistry as InMemoryClusterRegistry
