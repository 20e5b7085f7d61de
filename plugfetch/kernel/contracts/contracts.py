from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Sequence


class PluginHost(Protocol):
    """
    Defines the contract for the application that loads fetched plugins.
    The activation bridge interacts with the host ONLY through this interface.
    """

    def is_active(self, name: str) -> bool:
        """
        Whether a plugin with this name is already loaded.
        """
        ...

    def load_plugin(self, path: Path) -> Any:
        """
        Load the plugin file and return an opaque handle.
        Raises ActivationFailure when the file is not a valid plugin.
        """
        ...

    def enable(self, handle: Any) -> None:
        """
        Enable a loaded plugin. Raises ActivationFailure on failure.
        """
        ...

    def plugin_name(self, handle: Any) -> str:
        ...

    def declared_commands(self, handle: Any) -> Mapping[str, Mapping[str, Any]]:
        """
        The commands a plugin declares, keyed by command name, with their
        description/usage/permission/permission-message/aliases metadata.
        """
        ...

    def get_command(self, name: str) -> Optional[Any]:
        ...

    def set_command_metadata(
        self,
        command: Any,
        description: Optional[str],
        usage: Optional[str],
        permission: Optional[str],
        permission_message: Optional[str],
        aliases: Optional[Sequence[str]],
    ) -> None:
        """
        Copy declared metadata onto a host command. `aliases` of None leaves
        the command's current aliases unchanged.
        """
        ...


class CommandRegistry(Protocol):
    """
    Registers commands on the host's live command table.
    """

    def register(self, command: Any, owner: str) -> None:
        ...

    def sync(self) -> None:
        """
        Push the registered commands to connected clients.
        """
        ...
