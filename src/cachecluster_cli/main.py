"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio

import structlog
import typer
from rich.console import Console
from rich.table import Table

from cachecluster.observability import configure_logging
from cachecluster.snapshot import ClusterSnapshot, delete_snapshot, load_snapshot
from cachecluster_core.clock import SystemClock
from cachecluster_core.config.settings import Settings
from cachecluster_core.exceptions import CacheClusterError
from cachecluster_core.models.cluster import ClusterConfig
from cachecluster_core.models.headers import dump_header_entry
from cachecluster_infra.media import close_medium, create_medium

app = typer.Typer(
    name="cache-cluster",
    help="Inspect and clear persisted cache clusters",
)
console = Console()
logger = structlog.get_logger()


def _prepare(verbose: bool) -> Settings:
    """Load settings and configure logging."""
    settings = Settings()
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)
    return settings


def _entry_count(data: object) -> int:
    """Number of entries in a bulk export (list or object)."""
    if isinstance(data, list | dict):
        return len(data)
    return 1


async def _load(settings: Settings, config: ClusterConfig) -> ClusterSnapshot | None:
    medium = await create_medium(settings)
    try:
        return await load_snapshot(medium, config)
    finally:
        await close_medium(medium)


async def _delete(settings: Settings, config: ClusterConfig) -> None:
    medium = await create_medium(settings)
    try:
        await delete_snapshot(medium, config)
    finally:
        await close_medium(medium)


@app.command()
def show(
    persistence_name: str = typer.Argument(..., help="Contents slot of the cluster"),
    timestamps: str | None = typer.Option(None, "--timestamps", help="Stamps slot name"),
    headers: str | None = typer.Option(None, "--headers", help="Headers slot name"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show storages, expiry stamps and headers of a persisted cluster."""
    settings = _prepare(verbose)
    config = ClusterConfig(
        persistence_name=persistence_name,
        timestamps_name=timestamps,
        headers_name=headers,
    )

    try:
        snapshot = asyncio.run(_load(settings, config))
    except CacheClusterError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if snapshot is None:
        console.print(f"[yellow]No cluster persisted under[/yellow] {persistence_name}")
        return

    now = SystemClock().now()
    stamps = snapshot.stamps or {}
    table = Table(title=persistence_name)
    table.add_column("Storage")
    table.add_column("Entries", justify="right")
    table.add_column("Expires")
    table.add_column("Stale")
    for name in sorted(snapshot.contents.keys() | stamps.keys()):
        stamp = stamps.get(name)
        table.add_row(
            name,
            str(_entry_count(snapshot.contents[name])) if name in snapshot.contents else "-",
            stamp.isoformat() if stamp else "-",
            ("[red]yes[/red]" if stamp < now else "no") if stamp else "-",
        )
    console.print(table)

    if snapshot.headers:
        console.print("\n[bold]Conditional headers:[/bold]")
        for name, entry in sorted(snapshot.headers.items()):
            console.print(f"  {name}: {dump_header_entry(entry)}")


@app.command()
def clear(
    persistence_name: str = typer.Argument(..., help="Contents slot of the cluster"),
    timestamps: str | None = typer.Option(None, "--timestamps", help="Stamps slot name"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Delete the contents and stamps slots of a persisted cluster."""
    settings = _prepare(verbose)
    config = ClusterConfig(persistence_name=persistence_name, timestamps_name=timestamps)

    try:
        asyncio.run(_delete(settings, config))
    except CacheClusterError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    logger.info("cli_cluster_cleared", persistence_name=persistence_name)
    console.print(f"[bold green]Cleared[/bold green] {persistence_name}")


@app.command()
def version() -> None:
    """Show version."""
    console.print("cache-cluster v0.1.0")


if __name__ == "__main__":
    app()
