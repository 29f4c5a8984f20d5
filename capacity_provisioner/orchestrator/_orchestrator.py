import asyncio
import signal
import threading
from concurrent.futures import ThreadPoolExecutor

import newrelic.agent

from ..configuration import AppConfig
from ..entities import Demand
from ..infrastructure import ThreadPoller
from ..infrastructure.db.sqlite import SQLiteProvisioningEventRepository
from ..infrastructure.registry import InMemoryClusterRegistry
from ..infrastructure.sources import create_capacity_source
from ..mediators.capacity_mediator import CapacityMediator
from ..services import AccessGuard, RetentionService
from ..services.provisioning import ProvisioningLoop
from ..state.history_recorder import ProvisioningHistoryRecorder
from ..state.logging_observer import LoggingProvisioningObserver
from ..state.provisioning_events_subject import ProvisioningEventsSubject
from ..utils.compat import add_signal_handler
from ..utils.logging_utils import attach_uvicorn_to_my_logger, get_logger

logger = get_logger()


class Orchestrator:

    def __init__(self, configuration: AppConfig):
        self.config = configuration

        self.stop_event = asyncio.Event()
        self.threads_stop_event = threading.Event()

        self._starters = []
        self._finishers = []

        self._backgrounds = []
        self._daemons = []

        database_config = self.config.database
        if database_config.type == "sqlite":
            self.event_repository = SQLiteProvisioningEventRepository(database_config.path)
        else:
            raise ValueError(f"Unsupported database: {database_config}")

        self.state_subject = ProvisioningEventsSubject()
        self.state_subject.add_observer(LoggingProvisioningObserver())
        self.state_subject.add_observer(ProvisioningHistoryRecorder(self.event_repository))

        self.registry = InMemoryClusterRegistry()

        demand_config = configuration.demand
        if demand_config.type == "yaml":
            from ..infrastructure.demand import YamlDemandRepository
            logger.debug("Configuring demand: YAML")

            self.demand_repository = YamlDemandRepository(demand_config.path, registry=self.registry)
        elif demand_config.type == "static":
            from ..infrastructure.demand import StaticDemandRepository
            logger.debug("Configuring demand: static")

            self.demand_repository = StaticDemandRepository([
                Demand(entry.label, entry.excess_workload)
                for entry in demand_config.entries
            ], registry=self.registry)
        else:
            raise ValueError(f"Unsupported demand type: {demand_config.type}")

        logger.debug(f"Configuring {len(configuration.sources)} capacity source(s)...")
        self.sources = []
        for source_config in configuration.sources:
            logger.info(f"Configuring capacity source {source_config.name} ({source_config.type})")

            source = create_capacity_source(source_config, configuration.retention)
            self.sources.append(source)
            self._finishers.append(source.close)

        self.release_executor = ThreadPoolExecutor(
            max_workers=configuration.retention.release_workers,
            thread_name_prefix="release",
        )

        self.retention_service = RetentionService(
            registry=self.registry,
            state_subject=self.state_subject,
            release_executor=self.release_executor,
        )

        self.provisioning_loop = ProvisioningLoop(
            sources=self.sources,
            registry=self.registry,
            demand_repository=self.demand_repository,
            state_subject=self.state_subject,
            completion_timeout=configuration.provisioner.completion_timeout,
            discard_node=self.retention_service.release_detached_node,
        )

        self.access_guard = AccessGuard.from_config(configuration.security)

        self.capacity_mediator = CapacityMediator(
            provisioning_loop=self.provisioning_loop,
            retention_service=self.retention_service,
            registry=self.registry,
            access_guard=self.access_guard,
            event_repository=self.event_repository,
        )

        provisioning_poller = ThreadPoller(
            task=self.process_provisioning_tick,
            interval=configuration.provisioner.interval,
            stop_event=self.threads_stop_event,
            name="provisioning",
        )
        self._backgrounds.append(provisioning_poller.start_polling)

        retention_poller = ThreadPoller(
            task=self.process_retention_check,
            interval=configuration.retention.interval,
            stop_event=self.threads_stop_event,
            name="retention",
        )
        self._backgrounds.append(retention_poller.start_polling)

        self._finishers.append(self.shutdown_release_executor)

        if configuration.api is not None:
            from ..infrastructure.http import create_admin_api, AdminServices
            import uvicorn

            host = configuration.api.host
            port = configuration.api.port
            logger.info(f"Start admin HTTP server over {host}:{port}")

            admin_api = create_admin_api(AdminServices(capacity_mediator=self.capacity_mediator))

            def make_uvicorn_runner(app, host, port):
                config = uvicorn.Config(app, host=host, port=port, log_config=None, access_log=True)
                server = uvicorn.Server(config)

                def uvicorn_run():
                    server.run()

                def uvicorn_stop():
                    if not server.should_exit:
                        server.should_exit = True

                return uvicorn_run, uvicorn_stop

            uvicorn_run, uvicorn_stop = make_uvicorn_runner(admin_api, host, port)
            attach_uvicorn_to_my_logger()
            self._backgrounds.append(uvicorn_run)
            self._finishers.insert(0, uvicorn_stop)

    @newrelic.agent.background_task()
    def process_provisioning_tick(self):
        try:
            self.provisioning_loop.tick()
        except Exception as e:
            get_logger().error(f"Error during the provisioning tick: {e}", exc_info=e)

    @newrelic.agent.background_task()
    def process_retention_check(self):
        try:
            self.retention_service.check_nodes()
        except Exception as e:
            get_logger().error(f"Error during the retention check: {e}", exc_info=e)

    def shutdown_release_executor(self):
        logger.info("Waiting for the pending releases...")

        self.release_executor.shutdown(wait=True)

    async def run(self):
        loop = asyncio.get_running_loop()
        add_signal_handler(loop, signal.SIGINT, self.shutdown)
        add_signal_handler(loop, signal.SIGTERM, self.shutdown)

        await self._start()

        await self.stop_event.wait()

        await self._stop()

    def shutdown(self):
        logger.info("Shutdown requested")

        self.stop_event.set()
        self.threads_stop_event.set()

    async def _start(self):
        logger.debug("-- Starting provisioner...")

        for starter in self._starters:
            logger.debug("-- Starting %s...", starter.__name__)
            await starter()
        logger.debug("-- Processed starters")

        for background in self._backgrounds:
            thread = threading.Thread(target=background, daemon=True)
            logger.debug("-- Creating %s...", thread)
            self._daemons.append(thread)
        logger.debug("-- Processed backgrounds")

        for thread in self._daemons:
            logger.debug("-- Starting thread %s...", thread)
            thread.start()
        logger.debug("-- Processed daemons")

    async def _stop(self):
        logger.debug("-- Stopping provisioner...")

        for finisher in self._finishers:
            logger.debug("-- Finishing %s...", getattr(finisher, "__name__", finisher))
            if asyncio.iscoroutinefunction(finisher):
                await finisher()
            else:
                finisher()
        logger.debug("-- Processed finishers")

        for thread in self._daemons:
            logger.debug("Waiting for thread %s...", thread)
            thread.join()
        logger.debug("-- Processed threads")
