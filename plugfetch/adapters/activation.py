"""
Hands successfully fetched plugins to the host for loading, enabling and
command registration.
"""
from typing import Any, Optional

from plugfetch.internal.logging import get_logger
from plugfetch.kernel.artifacts import Artifact
from plugfetch.kernel.contracts.contracts import CommandRegistry, PluginHost
from plugfetch.kernel.errors import ActivationFailure, CommandRegistrationFailure

logger = get_logger(__name__)


def normalize_aliases(raw: Any) -> Optional[list[str]]:
    """
    None means "leave the host's aliases alone".
    """
    if isinstance(raw, (list, tuple)):
        return [str(alias) for alias in raw]
    if isinstance(raw, str):
        return [raw]
    return None


class ActivationBridge:
    def __init__(self, host: PluginHost, registry: Optional[CommandRegistry] = None):
        self.host = host
        self.registry = registry

    def activate(self, artifact: Artifact) -> bool:
        """
        Loads and enables the artifact, then registers its commands.

        Returns True when the plugin ended up enabled. Command registration
        problems are logged but do not change the result.
        """
        if self.host.is_active(artifact.name):
            logger.info("Plugin already active, skipping activation", artifact=artifact.name)
            return False

        try:
            handle = self.host.load_plugin(artifact.destination)
            self.host.enable(handle)
        except ActivationFailure as e:
            logger.error("Failed to load plugin", artifact=artifact.name, reason=str(e))
            return False

        try:
            self.register_commands(handle)
        except Exception as e:
            logger.warning("Failed to register commands", artifact=artifact.name, reason=str(e))

        logger.info("Plugin enabled", artifact=artifact.name)
        return True

    def register_commands(self, handle: Any) -> int:
        """
        Registers every declared command the host knows about.

        A command the host or registry rejects is logged and skipped. Returns
        the number of commands registered.
        """
        if self.registry is None:
            raise CommandRegistrationFailure("no command registry available")

        owner = self.host.plugin_name(handle)
        registered = 0
        for name, meta in self.host.declared_commands(handle).items():
            command = self.host.get_command(name)
            if command is None:
                continue
            meta = meta or {}
            try:
                self.host.set_command_metadata(
                    command,
                    description=meta.get("description"),
                    usage=meta.get("usage"),
                    permission=meta.get("permission"),
                    permission_message=meta.get("permission-message"),
                    aliases=normalize_aliases(meta.get("aliases")),
                )
                self.registry.register(command, owner)
            except Exception as e:
                logger.warning("Failed to register command", plugin=owner, command=name, reason=str(e))
                continue
            registered += 1

        try:
            self.registry.sync()
        except Exception as e:
            logger.warning("Failed to sync commands", plugin=owner, reason=str(e))
        return registered
