# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
SwiftTrack Integration CLI Commands.

Runs adapter processes and provides operational commands for the broker
topology and the route optimizer.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from swifttrack_integration.errors import ProtocolConfigurationError
from swifttrack_integration.models.config import ModelIntegrationConfig
from swifttrack_integration.runtime.util_logging import configure_logging

console = Console()

_CONFIG_OPTION = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file; environment variables override its values",
)


def _load_config(config_path: Path | None) -> ModelIntegrationConfig:
    try:
        if config_path is None:
            return ModelIntegrationConfig.default()
        return ModelIntegrationConfig.from_yaml(config_path)
    except ProtocolConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        details = e.context.get("errors")
        if isinstance(details, list):
            for detail in details:
                console.print(f"  [red]{detail}[/red]")
        raise SystemExit(2) from e


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (default: INTEGRATION_LOG_LEVEL or INFO)",
)
def cli(log_level: str | None) -> None:
    """SwiftTrack Integration Layer CLI."""
    configure_logging(log_level)


# =============================================================================
# Adapter Processes
# =============================================================================


@cli.command("run")
@click.argument("adapter", type=click.Choice(["warehouse", "billing", "routes"]))
@_CONFIG_OPTION
def run_adapter(adapter: str, config_path: Path | None) -> None:
    """Run one adapter until SIGINT/SIGTERM."""
    from swifttrack_integration.runtime import (
        build_billing_runtime,
        build_route_runtime,
        build_warehouse_runtime,
    )

    config = _load_config(config_path)
    builders = {
        "warehouse": build_warehouse_runtime,
        "billing": build_billing_runtime,
        "routes": build_route_runtime,
    }
    runtime = builders[adapter](config)
    console.print(f"[bold blue]Starting {runtime.name}...[/bold blue]")
    try:
        asyncio.run(runtime.run_until_stopped())
    except ProtocolConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise SystemExit(2) from e
    console.print(f"[bold]{runtime.name} stopped[/bold]")


# =============================================================================
# Operational Commands
# =============================================================================


@cli.command("provision-topics")
@_CONFIG_OPTION
def provision_topics(config_path: Path | None) -> None:
    """Create the broker topics that do not exist yet."""
    from swifttrack_integration.event_bus import TopicProvisioner

    config = _load_config(config_path)
    provisioner = TopicProvisioner(
        bootstrap_servers=config.broker.bootstrap_servers,
        request_timeout_ms=int(config.broker.timeout_seconds * 1000),
        partitions=config.broker.topic_partitions,
        replication_factor=config.broker.topic_replication_factor,
        client_id=f"{config.broker.client_id}-admin",
    )
    result = asyncio.run(provisioner.ensure_topics_exist(list(config.topology.all_topics)))

    table = Table(title="Topic Provisioning")
    table.add_column("Topic", style="cyan")
    table.add_column("Result", style="bold")
    for outcome, style in (("created", "green"), ("existing", "dim"), ("failed", "red")):
        for topic in result.get(outcome, []):
            table.add_row(str(topic), f"[{style}]{outcome}[/{style}]")
    console.print(table)
    console.print(f"\n[bold]Status: {result['status']}[/bold]")
    if result["status"] != "success":
        raise SystemExit(1)


@cli.command("show-config")
@_CONFIG_OPTION
def show_config(config_path: Path | None) -> None:
    """Print the effective configuration with secrets masked."""
    config = _load_config(config_path)
    console.print_json(data=config.masked_dump())


@cli.command("eta")
@click.argument("origin_lat", type=float)
@click.argument("origin_lng", type=float)
@click.argument("dest_lat", type=float)
@click.argument("dest_lng", type=float)
@_CONFIG_OPTION
def eta(
    origin_lat: float,
    origin_lng: float,
    dest_lat: float,
    dest_lng: float,
    config_path: Path | None,
) -> None:
    """Calculate an ETA through the route optimizer (local fallback when unconfigured)."""
    from swifttrack_integration.bridges import RouteOptimizerBridge
    from swifttrack_integration.errors import RuntimeHostError
    from swifttrack_integration.models.routing import (
        ModelCoordinates,
        ModelEtaResult,
    )

    config = _load_config(config_path)
    try:
        origin = ModelCoordinates(latitude=origin_lat, longitude=origin_lng)
        destination = ModelCoordinates(latitude=dest_lat, longitude=dest_lng)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    async def _calculate() -> ModelEtaResult:
        bridge = RouteOptimizerBridge(config.route_optimizer)
        try:
            return await bridge.calculate_eta(origin, destination)
        finally:
            await bridge.close()

    try:
        result = asyncio.run(_calculate())
    except RuntimeHostError as e:
        console.print(f"[red]ETA failed: {e}[/red]")
        raise SystemExit(1) from e

    table = Table(title="ETA")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Distance (km)", f"{result.distance:.2f}")
    table.add_row("Duration (s)", f"{result.duration:.0f}")
    table.add_row("ETA", result.eta.isoformat())
    table.add_row("Provider", result.provider)
    table.add_row("Traffic considered", str(result.traffic_considered))
    console.print(table)


if __name__ == "__main__":
    cli()
