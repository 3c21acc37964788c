# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
pg-stat-exporter CLI Commands.

Provides the exporter entry point: the long-running ``serve`` command, a
one-shot ``scrape-once`` for debugging and a ``collectors`` listing.

Configuration is read from PG_STAT_EXPORTER_* and POSTGRES_* environment
variables first; command-line options override it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

import click
from pydantic import SecretStr
from rich.console import Console
from rich.table import Table

from pg_stat_exporter.collectors import (
    CollectorRegistry,
    get_collector_registry,
    register_builtin_collectors,
)
from pg_stat_exporter.enums import EnumStatementLabel
from pg_stat_exporter.errors import CollectorError
from pg_stat_exporter.infrastructure import PostgresInstance
from pg_stat_exporter.models import ModelExporterConfig
from pg_stat_exporter.observability import (
    PrometheusBridge,
    configure_logging,
    create_registry,
    render_latest,
    start_metrics_server,
)
from pg_stat_exporter.runtime import ExporterRuntime

console = Console()
logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., object])


def _exporter_options(func: F) -> F:
    """Options shared by every command that builds an exporter."""
    options = [
        click.option(
            "--dsn",
            default=None,
            help="PostgreSQL DSN (default: POSTGRES_DSN or POSTGRES_* variables)",
        ),
        click.option(
            "--scrape-timeout",
            default=None,
            type=click.FloatRange(min=0, min_open=True),
            help="Per-collector deadline in seconds (default: PG_STAT_EXPORTER_SCRAPE_TIMEOUT)",
        ),
        click.option(
            "--collector",
            "enabled_collectors",
            multiple=True,
            help="Enable a collector by name (repeatable)",
        ),
        click.option(
            "--no-collector",
            "disabled_collectors",
            multiple=True,
            help="Disable a collector by name (repeatable)",
        ),
        click.option(
            "--reset-after-read/--no-reset-after-read",
            default=None,
            help="Reset pg_stat_statements after each read "
            "(default: PG_STAT_EXPORTER_RESET_AFTER_READ)",
        ),
        click.option(
            "--statement-label",
            default=None,
            type=click.Choice([label.value for label in EnumStatementLabel]),
            help="Column identifying a statement (default: PG_STAT_EXPORTER_STATEMENT_LABEL)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(
    dsn: str | None = None,
    listen_port: int | None = None,
    scrape_interval: float | None = None,
    scrape_timeout: float | None = None,
    enabled_collectors: tuple[str, ...] = (),
    disabled_collectors: tuple[str, ...] = (),
    reset_after_read: bool | None = None,
    statement_label: str | None = None,
) -> ModelExporterConfig:
    """Merge environment configuration with command-line overrides.

    Raises:
        ConfigurationError: If an environment variable holds an invalid value.
    """
    config = ModelExporterConfig.from_environment()

    connection = config.connection
    if dsn:
        connection = connection.model_copy(update={"dsn": SecretStr(dsn)})

    settings_update: dict[str, object] = {}
    if reset_after_read is not None:
        settings_update["reset_after_read"] = reset_after_read
    if statement_label is not None:
        settings_update["statement_label"] = EnumStatementLabel(statement_label)

    overrides = dict(config.collector_overrides)
    overrides.update({name: True for name in enabled_collectors})
    overrides.update({name: False for name in disabled_collectors})

    update: dict[str, object] = {
        "connection": connection,
        "collector_settings": config.collector_settings.model_copy(
            update=settings_update
        ),
        "collector_overrides": overrides,
    }
    if listen_port is not None:
        update["listen_port"] = listen_port
    if scrape_interval is not None:
        update["scrape_interval"] = scrape_interval
    if scrape_timeout is not None:
        update["scrape_timeout"] = scrape_timeout
    return config.model_copy(update=update)


def _builtin_registry() -> CollectorRegistry:
    registry = get_collector_registry()
    register_builtin_collectors(registry)
    return registry


def _build_runtime(config: ModelExporterConfig) -> tuple[ExporterRuntime, PostgresInstance]:
    collectors = _builtin_registry().create_enabled(
        config.collector_settings, config.collector_overrides
    )
    if not collectors:
        logger.warning(
            "No collectors enabled; enable one with --collector NAME",
            extra={"registered_collectors": _builtin_registry().list_names()},
        )
    instance = PostgresInstance(config.connection)
    runtime = ExporterRuntime(
        instance,
        collectors,
        scrape_timeout=config.scrape_timeout,
        namespace=config.collector_settings.namespace,
    )
    return runtime, instance


@click.group()
def cli() -> None:
    """PostgreSQL pg_stat_statements Prometheus exporter."""


@cli.command("serve")
@click.option(
    "--listen-port",
    default=None,
    type=click.IntRange(min=0, max=65535),
    help="Port serving /metrics (default: PG_STAT_EXPORTER_LISTEN_PORT)",
)
@click.option(
    "--scrape-interval",
    default=None,
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds between scrapes (default: PG_STAT_EXPORTER_SCRAPE_INTERVAL)",
)
@_exporter_options
def serve_cmd(
    listen_port: int | None,
    scrape_interval: float | None,
    dsn: str | None,
    scrape_timeout: float | None,
    enabled_collectors: tuple[str, ...],
    disabled_collectors: tuple[str, ...],
    reset_after_read: bool | None,
    statement_label: str | None,
) -> None:
    """Serve /metrics and scrape PostgreSQL periodically."""
    configure_logging()
    try:
        config = _build_config(
            dsn=dsn,
            listen_port=listen_port,
            scrape_interval=scrape_interval,
            scrape_timeout=scrape_timeout,
            enabled_collectors=enabled_collectors,
            disabled_collectors=disabled_collectors,
            reset_after_read=reset_after_read,
            statement_label=statement_label,
        )
        asyncio.run(_run_serve(config))
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted, shutting down[/yellow]")
    except CollectorError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)


async def _run_serve(config: ModelExporterConfig) -> None:
    """Async implementation for the serve command."""
    runtime, instance = _build_runtime(config)
    registry = create_registry(PrometheusBridge(runtime))
    start_metrics_server(config.listen_port, registry)
    try:
        await runtime.run_forever(config.scrape_interval)
    finally:
        await instance.close()


@cli.command("scrape-once")
@_exporter_options
def scrape_once_cmd(
    dsn: str | None,
    scrape_timeout: float | None,
    enabled_collectors: tuple[str, ...],
    disabled_collectors: tuple[str, ...],
    reset_after_read: bool | None,
    statement_label: str | None,
) -> None:
    """Run a single scrape and print the Prometheus exposition."""
    configure_logging()
    try:
        config = _build_config(
            dsn=dsn,
            scrape_timeout=scrape_timeout,
            enabled_collectors=enabled_collectors,
            disabled_collectors=disabled_collectors,
            reset_after_read=reset_after_read,
            statement_label=statement_label,
        )
        exposition, failed = asyncio.run(_run_scrape_once(config))
    except CollectorError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    click.echo(exposition, nl=False)
    raise SystemExit(1 if failed else 0)


async def _run_scrape_once(config: ModelExporterConfig) -> tuple[str, list[str]]:
    """Async implementation for scrape-once; returns exposition and failed collectors."""
    runtime, instance = _build_runtime(config)
    try:
        results = await runtime.scrape()
    finally:
        await instance.close()
    registry = create_registry(PrometheusBridge(runtime))
    return render_latest(registry), [r.collector for r in results if not r.success]


@cli.command("collectors")
@click.option(
    "--collector",
    "enabled_collectors",
    multiple=True,
    help="Enable a collector by name (repeatable)",
)
@click.option(
    "--no-collector",
    "disabled_collectors",
    multiple=True,
    help="Disable a collector by name (repeatable)",
)
def collectors_cmd(
    enabled_collectors: tuple[str, ...], disabled_collectors: tuple[str, ...]
) -> None:
    """List registered collectors and their effective enablement."""
    try:
        config = _build_config(
            enabled_collectors=enabled_collectors,
            disabled_collectors=disabled_collectors,
        )
        registry = _builtin_registry()
        enabled = registry.resolve_enabled(config.collector_overrides)
    except CollectorError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    table = Table(title=f"Registered Collectors ({len(enabled)})")
    table.add_column("Collector", style="cyan")
    table.add_column("Default", style="dim")
    table.add_column("Enabled", style="bold")
    for name, is_enabled in enabled.items():
        default = registry.get(name).default_enabled
        table.add_row(
            name,
            "enabled" if default else "disabled",
            "[green]yes[/green]" if is_enabled else "[red]no[/red]",
        )
    console.print(table)


__all__ = ["cli"]
