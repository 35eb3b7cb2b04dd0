"""
Command-line interface for Travel Gallery.

Runs the API server and offers maintenance commands for the dataset.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import Settings
from ..core.database import ImageDatabase
from ..version import __version__

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


def open_database(settings: Settings) -> ImageDatabase:
    """Build the store described by ``settings``."""
    return ImageDatabase(
        settings.resolved_database_path,
        template_path=settings.resolved_template_path,
        cache_timeout=settings.cache_timeout_seconds,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Travel Gallery - photo gallery metadata server."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", Settings())


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: settings)")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(
    ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool
) -> None:
    """Start the gallery API server."""
    settings: Settings = ctx.obj["settings"]
    host = host or settings.host
    port = port or settings.port

    console.print(
        f"\n[bold cyan]Travel Gallery[/bold cyan] [dim]v{__version__}[/dim]\n"
    )
    console.print(f"Dataset: {settings.resolved_database_path}")
    console.print(f"Images: {settings.resolved_images_dir}")
    console.print(f"Server: http://{host}:{port}\n")

    uvicorn.run(
        "travel_gallery.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@cli.command()
@click.option(
    "--images-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Image root to scan (default: settings)",
)
@click.pass_context
def sync(ctx: click.Context, images_dir: Optional[Path]) -> None:
    """Import images on disk that are not in the dataset yet."""
    settings: Settings = ctx.obj["settings"]
    images_dir = images_dir or settings.resolved_images_dir

    db = open_database(settings)
    new_count = db.sync_with_filesystem(images_dir)
    console.print(f"[green]Synced {new_count} new images[/green] from {images_dir}")


@cli.command()
@click.option(
    "--keep-images",
    is_flag=True,
    help="Only empty the dataset, leave the image directory alone",
)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx: click.Context, keep_images: bool, yes: bool) -> None:
    """Clear all images and reset the dataset to an empty state."""
    settings: Settings = ctx.obj["settings"]
    images_dir = None if keep_images else settings.resolved_images_dir

    if not yes:
        target = "the dataset" if keep_images else f"the dataset and {images_dir}"
        click.confirm(f"This will erase {target}. Continue?", abort=True)

    db = open_database(settings)
    if not db.reset(images_dir):
        console.print("[red]Error: could not write the empty dataset[/red]")
        sys.exit(1)

    console.print("[green]Dataset cleared and reset to empty state[/green]")


@cli.command()
@click.pass_context
def countries(ctx: click.Context) -> None:
    """Show per-country image counts."""
    settings: Settings = ctx.obj["settings"]
    db = open_database(settings)
    rows = db.get_all_countries()

    if not rows:
        console.print("[yellow]No images in the dataset[/yellow]")
        return

    table = Table(title="Countries")
    table.add_column("Code", style="bold cyan")
    table.add_column("Country")
    table.add_column("Images", justify="right")
    table.add_column("Featured image")

    for country in rows:
        table.add_row(
            country.code,
            country.name,
            str(country.image_count),
            country.featured_image or "-",
        )

    console.print(table)


if __name__ == "__main__":
    cli()
