import importlib.metadata
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from plugfetch.cli import core
from plugfetch.internal import paths
from plugfetch.internal.config import ConfigError, load_batch_config
from plugfetch.internal.constants import APP_NAME
from plugfetch.internal.logging import setup_logging
from plugfetch.kernel.artifacts import CascadeState, HostVersion

console = Console()

_STATE_STYLES = {
    CascadeState.SUCCEEDED: "green",
    CascadeState.MANUAL_ONLY: "yellow",
    CascadeState.FAILED: "red",
}


def _package_version() -> str:
    try:
        return importlib.metadata.version(APP_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


def download(
    config: Path = typer.Argument(..., help="JSON batch file listing the plugins to fetch."),
    host_version: str = typer.Option(..., "--host-version", help="Host version, e.g. 1.20.4-R0.1-SNAPSHOT."),
    dest_dir: Optional[Path] = typer.Option(None, "--dest-dir", help="Directory for plugins without an explicit path."),
    app_name: str = typer.Option(APP_NAME, "--app-name", help="Name sent in the User-Agent."),
    app_version: Optional[str] = typer.Option(None, "--app-version", help="Version sent in the User-Agent."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Read timeout in seconds for each request."),
):
    """
    Resolve and download every plugin listed in a batch file.
    """
    setup_logging(log_file_path=paths.get_log_file(), console_output=True)

    try:
        version = HostVersion.parse(host_version)
        batch = load_batch_config(config)
    except (ConfigError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2)

    artifacts = batch.to_artifacts(core.default_destination(dest_dir))
    results = core.run_batch(
        artifacts,
        host_version=version,
        app_name=app_name,
        app_version=app_version or _package_version(),
        timeout=timeout,
    )

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    table = Table(title="Plugins")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("State")
    table.add_column("Platform")
    table.add_column("Location")

    for result in results:
        style = _STATE_STYLES[result.state]
        location = result.url if result.state is CascadeState.MANUAL_ONLY else str(result.destination)
        table.add_row(
            result.name,
            f"[{style}]{result.state.value}[/{style}]",
            result.platform.name if result.platform else "-",
            location if result.state is not CascadeState.FAILED else "-",
        )
    console.print(table)

    if not all(r.succeeded for r in results):
        raise typer.Exit(1)
