import unittest

from capacity_provisioner.entities import IdleTimeoutRetentionPolicy, Node, ProvisionRequestError
from capacity_provisioner.infrastructure.sources.dummy import DummyCapacitySource


class TestDummyCapacitySource(unittest.TestCase):

    def setUp(self):
        self.source = DummyCapacitySource(
            "dummy",
            display_name="Dummy pool",
            labels=["gpu"],
            executors_per_node=2,
            idle_timeout=60,
        )

    def tearDown(self):
        self.source.close()

    def test_identity(self):
        self.assertEqual("dummy", self.source.name)
        self.assertEqual("Dummy pool", self.source.display_name)
        self.assertEqual("cloud/dummy", self.source.url)

    def test_invalid_name(self):
        with self.assertRaises(ValueError):
            DummyCapacitySource("not a name")

    def test_can_provision(self):
        self.assertTrue(self.source.can_provision("gpu"))
        self.assertTrue(self.source.can_provision(None))
        self.assertFalse(self.source.can_provision("arm64"))

    def test_provision_rounds_up_to_whole_nodes(self):
        planned = self.source.provision("gpu", 3)

        self.assertEqual(2, len(planned))
        self.assertEqual([2, 2], [capacity.promised_executors for capacity in planned])

        nodes = [capacity.completion.result(timeout=5) for capacity in planned]
        for node in nodes:
            self.assertIsInstance(node, Node)
            self.assertTrue(node.name.startswith("dummy-"))
            self.assertEqual("dummy", node.source_name)
            self.assertEqual(2, node.num_executors)
            self.assertTrue(node.has_label("gpu"))
            self.assertIsInstance(node.retention_policy, IdleTimeoutRetentionPolicy)

        self.assertEqual(2, len({node.name for node in nodes}))
        self.assertEqual({node.name for node in nodes}, self.source.get_node_names())

    def test_max_nodes(self):
        source = DummyCapacitySource("limited", labels=["gpu"], max_nodes=2)
        try:
            self.assertEqual(2, len(source.provision("gpu", 5)))
            self.assertEqual([], source.provision("gpu", 1))
        finally:
            source.close()

    def test_release_frees_a_slot(self):
        source = DummyCapacitySource("limited", max_nodes=1)
        try:
            node = source.provision(None, 1)[0].completion.result(timeout=5)

            node.release_resources()

            self.assertEqual([node.name], source.released_node_names)
            self.assertEqual(0, source.count_nodes())
            self.assertEqual(1, len(source.provision(None, 1)))
        finally:
            source.close()

    def test_provision_after_close(self):
        self.source.close()

        with self.assertRaises(ProvisionRequestError):
            self.source.provision("gpu", 1)

        self.assertEqual(0, self.source.count_nodes())


if __name__ == '__main__':
    unittest.main()
