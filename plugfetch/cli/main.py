import typer

from plugfetch.cli.commands import (
    download,
    platforms,
    version,
)

app = typer.Typer(
    name="plugfetch",
    help="Resolve and download server plugins from their platforms.",
    no_args_is_help=True
)

app.command("download")(download.download)
app.command("platforms")(platforms.platforms)
app.command("version")(version.version)

if __name__ == "__main__":
    app()
