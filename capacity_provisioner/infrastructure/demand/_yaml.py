import os

from ...entities import Demand
from ...repositories import ClusterRegistry, DemandRepository
from ...utils.logging_utils import get_logger
from ._free_executors import deduct_free_executors

logger = get_logger()


class YamlDemandRepository(DemandRepository):
    """
    Reads the demand from a YAML file on every load:

        demand:
          - label: gpu
            excess-workload: 3
          - label: null
            excess-workload: 1

    An invalid entry is skipped on its own. With a registry, the free executors of the
    registered nodes are deducted from the workload of each label.
    """

    def __init__(self, file_path: str, registry: ClusterRegistry | None = None):
        self.file_path = file_path
        self.registry = registry
        if not self.exists():
            logger.warning(f"Demand file not found: {file_path}")

        from ruamel.yaml import YAML
        self._yaml = YAML(typ="safe")

    def exists(self) -> bool:
        return os.path.exists(self.file_path)

    def load_raw_yaml(self) -> dict:
        root = None
        if self.exists():
            with open(self.file_path, 'r') as file:
                root = self._yaml.load(file)

        if root is None:
            root = {}

        root.setdefault('demand', [])

        return root

    def load(self):
        demands: dict[str | None, Demand] = {}
        for index, entry in enumerate(self.load_raw_yaml()['demand'] or []):
            try:
                demand = self._parse_entry(entry)
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid demand entry #{index} in {self.file_path}: {e}")
                continue

            if demand.label in demands:
                logger.warning(f"Demand for label {demand.label} is listed more than once in {self.file_path}, keeping the last one")

            demands[demand.label] = demand

        return deduct_free_executors(list(demands.values()), self.registry)

    @staticmethod
    def _parse_entry(entry) -> Demand:
        if not isinstance(entry, dict):
            raise TypeError(f"expected a mapping, got {entry!r}")

        label = entry.get("label")
        excess_workload = entry.get("excess-workload", entry.get("excess_workload", 0))

        # floats and booleans are rejected
        if isinstance(excess_workload, bool) or not isinstance(excess_workload, (int, str)):
            raise TypeError(f"invalid excess-workload {excess_workload!r}")

        return Demand(None if label is None else str(label), int(excess_workload))
