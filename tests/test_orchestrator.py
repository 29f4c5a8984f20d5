import os
import tempfile
import unittest
from concurrent.futures import wait

from capacity_provisioner.configuration import AppConfig
from capacity_provisioner.entities import ProvisioningEvent
from capacity_provisioner.orchestrator import Orchestrator

Kind = ProvisioningEvent.Kind


class TestOrchestrator(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.configuration = AppConfig(**{
            "demand": {
                "type": "static",
                "entries": [{"label": "gpu", "excess-workload": 1}],
            },
            "sources": [
                {"type": "dummy", "name": "dummy", "labels": ["gpu"], "idle-timeout": 0},
            ],
            "database": {
                "type": "sqlite",
                "path": os.path.join(self.directory.name, "events.db"),
            },
        })
        self.orchestrator = Orchestrator(self.configuration)

    def tearDown(self):
        for source in self.orchestrator.sources:
            source.close()
        self.orchestrator.shutdown_release_executor()
        self.directory.cleanup()

    def test_tick_provisions_and_records_the_history(self):
        self.orchestrator.process_provisioning_tick()

        outstanding = self.orchestrator.provisioning_loop.get_outstanding()
        self.assertEqual(1, len(outstanding))
        wait([planned.completion for planned in outstanding], timeout=5)

        self.orchestrator.demand_repository.set_demand("gpu", 0)
        self.orchestrator.process_provisioning_tick()

        nodes = self.orchestrator.registry.get_nodes()
        self.assertEqual(1, len(nodes))
        self.assertEqual("dummy", nodes[0].source_name)

        kinds = [event.kind for event in self.orchestrator.event_repository.load_recent()]
        self.assertEqual([Kind.SUCCEEDED, Kind.PLANNED, Kind.REQUESTED], kinds)

    def test_without_api(self):
        self.assertIsNone(self.configuration.api)
        self.assertEqual(2, len(self.orchestrator._backgrounds))

    def test_shutdown_sets_the_stop_events(self):
        self.orchestrator.shutdown()

        self.assertTrue(self.orchestrator.stop_event.is_set())
        self.assertTrue(self.orchestrator.threads_stop_event.is_set())


if __name__ == '__main__':
    unittest.main()
