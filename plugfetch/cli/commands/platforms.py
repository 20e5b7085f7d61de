from rich.console import Console
from rich.table import Table

from plugfetch.kernel.artifacts import Platform

console = Console()

_EXPECTS = {
    Platform.MODRINTH: "Project ID or slug (modrinth.com)",
    Platform.SPIGOT: "Numeric resource ID (spigotmc.org)",
    Platform.BUKKIT: "Project ID or slug (dev.bukkit.org)",
    Platform.EXTERNAL: "Direct-download URL",
    Platform.MANUAL: "URL to show for manual installation",
}


def platforms():
    """
    List the platforms in the order they are tried.
    """
    table = Table(title="Platforms")
    table.add_column("Priority", justify="right", style="green")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Expects")

    for platform in Platform.ordered():
        table.add_row(str(platform.value), platform.name.lower(), _EXPECTS[platform])
    console.print(table)
