import importlib.metadata

import typer

from plugfetch.internal.logging import get_logger

logger = get_logger(__name__)


def version():
    """
    Show the plugfetch version.
    """
    try:
        package_version = importlib.metadata.version("plugfetch")
        typer.echo(f"plugfetch version: {package_version}")
    except importlib.metadata.PackageNotFoundError:
        typer.echo("plugfetch is not installed or version metadata not found.")
        typer.echo("Please install the package first (e.g., pip install . or pip install -e .)")
        logger.warning("plugfetch package version not found.")
        raise typer.Exit(1)
