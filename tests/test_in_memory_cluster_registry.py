import threading
import unittest

from capacity_provisioner.entities import Node
from capacity_provisioner.infrastructure.registry import InMemoryClusterRegistry


class TestInMemoryClusterRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = InMemoryClusterRegistry()

    def test_register_and_get(self):
        node = Node("node-1", source_name="docker")

        self.assertTrue(self.registry.register_node(node))

        self.assertIs(node, self.registry.get_node("node-1"))
        self.assertIn("node-1", self.registry)
        self.assertEqual([node], self.registry.get_nodes_by_source("docker"))
        self.assertEqual([], self.registry.get_nodes_by_source("dummy"))

    def test_duplicate_name_is_rejected(self):
        first = Node("node-1")
        self.registry.register_node(first)

        self.assertFalse(self.registry.register_node(Node("node-1")))
        self.assertIs(first, self.registry.get_node("node-1"))
        self.assertEqual(1, len(self.registry))

    def test_remove(self):
        node = Node("node-1")
        self.registry.register_node(node)

        self.assertIs(node, self.registry.remove_node("node-1"))
        self.assertIsNone(self.registry.remove_node("node-1"))
        self.assertEqual([], self.registry.get_nodes())

    def test_concurrent_registration_of_the_same_name(self):
        results = []
        barrier = threading.Barrier(8)

        def register():
            barrier.wait()
            results.append(self.registry.register_node(Node("node-1")))

        threads = [threading.Thread(target=register) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(1, results.count(True))
        self.assertEqual(1, len(self.registry))


if __name__ == '__main__':
    unittest.main()
