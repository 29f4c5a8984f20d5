import os
import tempfile
import textwrap
import unittest

from capacity_provisioner.entities import Demand, Node
from capacity_provisioner.infrastructure.demand import StaticDemandRepository, YamlDemandRepository
from capacity_provisioner.infrastructure.registry import InMemoryClusterRegistry


class TestYamlDemandRepository(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.file_path = os.path.join(self.directory.name, "demand.yml")

    def tearDown(self):
        self.directory.cleanup()

    def write(self, content: str):
        with open(self.file_path, "w") as file:
            file.write(textwrap.dedent(content))

    def test_load(self):
        self.write("""
            demand:
              - label: gpu
                excess-workload: 3
              - label: null
                excess-workload: 1
              - label: cpu
                excess-workload: 0
        """)

        demands = YamlDemandRepository(self.file_path).load()

        self.assertEqual([Demand("gpu", 3), Demand(None, 1), Demand("cpu", 0)], demands)

    def test_file_is_read_on_every_load(self):
        self.write("demand:\n  - label: gpu\n    excess-workload: 3\n")
        repository = YamlDemandRepository(self.file_path)
        self.assertEqual([Demand("gpu", 3)], repository.load())

        self.write("demand:\n  - label: gpu\n    excess-workload: 1\n")
        self.assertEqual([Demand("gpu", 1)], repository.load())

    def test_missing_file_means_no_demand(self):
        repository = YamlDemandRepository(self.file_path)

        self.assertEqual([], repository.load())

    def test_empty_file_means_no_demand(self):
        self.write("")

        self.assertEqual([], YamlDemandRepository(self.file_path).load())

    def test_last_duplicate_label_wins(self):
        self.write("""
            demand:
              - label: gpu
                excess-workload: 3
              - label: gpu
                excess-workload: 5
        """)

        self.assertEqual([Demand("gpu", 5)], YamlDemandRepository(self.file_path).load())

    def test_invalid_entries_are_skipped_one_by_one(self):
        self.write("""
            demand:
              - just-a-string
              - label: gpu
                excess-workload: -1
              - label: cpu
                excess-workload: many
              - label: arm64
                excess-workload: 1.5
              - label: tpu
                excess-workload: 2
        """)

        self.assertEqual([Demand("tpu", 2)], YamlDemandRepository(self.file_path).load())

    def test_free_executors_are_deducted(self):
        self.write("demand:\n  - label: gpu\n    excess-workload: 3\n  - label: cpu\n    excess-workload: 1\n")
        registry = InMemoryClusterRegistry()
        registry.register_node(Node("gpu-node", num_executors=2, labels=["gpu"]))

        demands = YamlDemandRepository(self.file_path, registry=registry).load()

        self.assertEqual([Demand("gpu", 1), Demand("cpu", 1)], demands)


class TestStaticDemandRepository(unittest.TestCase):

    def test_set_and_clear(self):
        repository = StaticDemandRepository([Demand("gpu", 1)])

        repository.set_demand("gpu", 4)
        repository.set_demand(None, 2)

        self.assertEqual([Demand("gpu", 4), Demand(None, 2)], repository.load())

        repository.clear()
        self.assertEqual([], repository.load())

    def test_free_executors_are_deducted(self):
        registry = InMemoryClusterRegistry()
        repository = StaticDemandRepository([Demand("gpu", 3), Demand(None, 1)], registry=registry)

        idle = Node("idle-node", num_executors=2, labels=["gpu"])
        busy = Node("busy-node", num_executors=2, labels=["gpu"])
        busy.report_activity(busy_executors=2)
        registry.register_node(idle)
        registry.register_node(busy)

        self.assertEqual([Demand("gpu", 1), Demand(None, 0)], repository.load())

        idle.report_activity(busy_executors=1)
        self.assertEqual([Demand("gpu", 2), Demand(None, 0)], repository.load())


if __name__ == '__main__':
    unittest.main()
