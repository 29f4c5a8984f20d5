import unittest

from capacity_provisioner.configuration import SecurityConfig
from capacity_provisioner.entities import Actor, Permission, PermissionDeniedError, PermissionGrant
from capacity_provisioner.services import AccessGuard
from capacity_provisioner.services.access_guard import is_permitted


class TestAccessGuard(unittest.TestCase):

    def setUp(self):
        self.guard = AccessGuard([
            PermissionGrant("ops", frozenset({Permission.ADMINISTER})),
            PermissionGrant("ci", frozenset({Permission.PROVISION}), frozenset({"dummy"})),
        ])

    def test_system_actor_is_always_allowed(self):
        self.assertTrue(is_permitted([], Actor.SYSTEM, Permission.PROVISION, "anything"))

    def test_actor_named_system_is_not_the_system(self):
        self.assertFalse(self.guard.has_permission(Actor("SYSTEM"), Permission.PROVISION, "dummy"))

    def test_administer_implies_provision(self):
        self.assertTrue(self.guard.has_permission(Actor("ops"), Permission.PROVISION, "docker"))

    def test_provision_does_not_imply_administer(self):
        self.assertFalse(self.guard.has_permission(Actor("ci"), Permission.ADMINISTER, "dummy"))

    def test_grant_is_scoped_to_its_sources(self):
        self.assertTrue(self.guard.has_permission(Actor("ci"), Permission.PROVISION, "dummy"))
        self.assertFalse(self.guard.has_permission(Actor("ci"), Permission.PROVISION, "docker"))

    def test_unknown_actor_is_denied(self):
        with self.assertRaises(PermissionDeniedError) as context:
            self.guard.check_permission(Actor("mallory"), Permission.PROVISION, "dummy")

        self.assertEqual("mallory", context.exception.actor_name)
        self.assertEqual("provision", context.exception.permission_name)
        self.assertEqual("dummy", context.exception.source_name)

    def test_from_config(self):
        guard = AccessGuard.from_config(SecurityConfig(grants=[
            {"actor": "ci", "permissions": ["provision"], "sources": ["dummy"]},
            {"actor": "ops", "permissions": ["administer"]},
        ]))

        self.assertTrue(guard.has_permission(Actor("ci"), Permission.PROVISION, "dummy"))
        self.assertFalse(guard.has_permission(Actor("ci"), Permission.PROVISION, "docker"))
        self.assertTrue(guard.has_permission(Actor("ops"), Permission.PROVISION, "docker"))


if __name__ == '__main__':
    unittest.main()
