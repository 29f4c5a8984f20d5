import asyncio

import click

from .configuration import AppConfig
from .orchestrator import Orchestrator
from .utils.logging_utils import get_logger, init_logger

logger = get_logger()


@click.group()
def cli():
    pass


@cli.command()
@click.option("--configuration-file", "configuration_file_path", type=click.Path(exists=True, dir_okay=False), default="capacity-provisioner.yml", help="Path to the main configuration file.", show_default=True)
def start(
    configuration_file_path: str,
):
    configuration = AppConfig.from_file(configuration_file_path)

    init_logger(configuration.logging)

    orchestrator = Orchestrator(configuration)
    asyncio.run(orchestrator.run())


@cli.command("check-configuration")
@click.option("--configuration-file", "configuration_file_path", type=click.Path(exists=True, dir_okay=False), default="capacity-provisioner.yml", help="Path to the main configuration file.", show_default=True)
def check_configuration(
    configuration_file_path: str,
):
    configuration = AppConfig.from_file(configuration_file_path)

    click.echo(f"Configuration `{configuration_file_path}` is valid.")
    click.echo(f"Demand: {configuration.demand.type}")

    for index, source in enumerate(configuration.sources, start=1):
        labels = ", ".join(source.labels) if source.labels else "(untagged only)"
        click.echo(f"  {index}. {source.name} [{source.type}] labels: {labels}, executors per node: {source.executors_per_node}")

    if not configuration.security.grants:
        click.echo("No grant configured, only the provisioner itself can provision or remove capacity.")


@cli.command()
@click.option("--configuration-file", "configuration_file_path", type=click.Path(exists=True, dir_okay=False), default="capacity-provisioner.yml", help="Path to the main configuration file.", show_default=True)
@click.option("--limit", type=int, default=20, help="Number of events to print.", show_default=True)
@click.option("--failures", "failures_only", is_flag=True, help="Only print the failures.")
@click.option("--source", "source_name", type=str, help="Only print the failures of this capacity source.", required=False)
def history(
    configuration_file_path: str,
    limit: int,
    failures_only: bool,
    source_name: str | None,
):
    configuration = AppConfig.from_file(configuration_file_path)

    from .infrastructure.db.sqlite import SQLiteProvisioningEventRepository
    repository = SQLiteProvisioningEventRepository(configuration.database.path)

    if failures_only or source_name:
        events = repository.load_failures(source_name)[:limit]
    else:
        events = repository.load_recent(limit)

    for event in events:
        line = f"{event.occurred_at.isoformat(timespec='seconds')} {event.kind.value:<13} {event.source_name or '-'} {event.label or '-'}"
        if event.node_name:
            line += f" node={event.node_name}"
        if event.executors is not None:
            line += f" executors={event.executors}"
        if event.failure:
            line += f" error={event.failure.error_code.value if event.failure.error_code else '?'}: {event.failure.reason}"

        click.echo(line)


if __name__ == "__main__":
    cli()
