import unittest
from unittest.mock import MagicMock

from capacity_provisioner.entities import (
    Actor,
    CapacitySourceNotFoundError,
    Node,
    NodeNotFoundError,
    Permission,
    PermissionDeniedError,
    PermissionGrant,
)
from capacity_provisioner.infrastructure.registry import InMemoryClusterRegistry
from capacity_provisioner.mediators.capacity_mediator import CapacityMediator
from capacity_provisioner.services import AccessGuard, CapacitySource, RetentionService
from capacity_provisioner.services.provisioning import ProvisioningLoop
from capacity_provisioner.services.retention_service import MANUAL_REASON


class TestCapacityMediator(unittest.TestCase):

    def setUp(self):
        self.source = MagicMock(spec=CapacitySource)
        self.source.name = "docker"

        self.provisioning_loop = MagicMock(spec=ProvisioningLoop)
        self.provisioning_loop.get_source.return_value = self.source

        self.retention_service = MagicMock(spec=RetentionService)
        self.registry = InMemoryClusterRegistry()
        self.access_guard = AccessGuard([
            PermissionGrant("ci", frozenset({Permission.PROVISION}), frozenset({"docker"})),
            PermissionGrant("ops", frozenset({Permission.ADMINISTER})),
        ])

        self.mediator = CapacityMediator(self.provisioning_loop, self.retention_service, self.registry, self.access_guard)

    def test_provision_with_grant(self):
        self.mediator.provision(Actor("ci"), "docker", "gpu", 2)

        self.provisioning_loop.provision.assert_called_once_with("docker", "gpu", 2)

    def test_provision_is_denied_before_any_state_change(self):
        with self.assertRaises(PermissionDeniedError):
            self.mediator.provision(Actor("mallory"), "docker", "gpu", 2)

        self.provisioning_loop.provision.assert_not_called()

    def test_provision_on_unknown_source(self):
        self.provisioning_loop.get_source.side_effect = CapacitySourceNotFoundError("unknown")

        with self.assertRaises(CapacitySourceNotFoundError):
            self.mediator.provision(Actor("ci"), "unknown", "gpu", 1)

    def test_remove_node(self):
        node = Node("node-1", source_name="docker")
        self.registry.register_node(node)

        removed = self.mediator.remove_node(Actor("ci"), "node-1")

        self.assertIs(node, removed)
        self.retention_service.remove_node.assert_called_once_with(node, MANUAL_REASON)

    def test_remove_node_removed_concurrently(self):
        self.registry.register_node(Node("node-1", source_name="docker"))
        self.retention_service.remove_node.return_value = None

        with self.assertRaises(NodeNotFoundError):
            self.mediator.remove_node(Actor("ci"), "node-1")

    def test_report_node_activity(self):
        node = Node("node-1", num_executors=2, source_name="docker")
        self.registry.register_node(node)

        self.mediator.report_node_activity(Actor("ci"), "node-1", busy_executors=1, pending_tasks=3)

        self.assertFalse(node.is_idle())
        self.assertEqual(1, node.busy_executors)
        self.assertEqual(3, node.pending_tasks)

    def test_report_node_activity_is_denied_without_grant(self):
        node = Node("node-1", source_name="other")
        self.registry.register_node(node)

        with self.assertRaises(PermissionDeniedError):
            self.mediator.report_node_activity(Actor("ci"), "node-1", busy_executors=1)

        self.assertTrue(node.is_idle())

    def test_report_activity_of_unknown_node(self):
        with self.assertRaises(NodeNotFoundError):
            self.mediator.report_node_activity(Actor("ci"), "node-1", busy_executors=0)

    def test_remove_unknown_node(self):
        with self.assertRaises(NodeNotFoundError):
            self.mediator.remove_node(Actor("ci"), "node-1")

    def test_remove_node_without_source_requires_a_global_grant(self):
        self.registry.register_node(Node("static-node"))

        with self.assertRaises(PermissionDeniedError):
            self.mediator.remove_node(Actor("ci"), "static-node")

        self.mediator.remove_node(Actor("ops"), "static-node")
        self.retention_service.remove_node.assert_called_once()

    def test_system_actor(self):
        self.mediator.provision(Actor.SYSTEM, "docker", None, 1)

        self.provisioning_loop.provision.assert_called_once_with("docker", None, 1)


if __name__ == '__main__':
    unittest.main()
