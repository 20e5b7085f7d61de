"""
Error taxonomy for plugin resolution, fetching and activation.

None of these escape a single artifact's worker: resolution and fetch errors
feed the fallback cascade, terminal ones end up on the CascadeResult, and
activation errors are only logged.
"""


class PluginFetchError(Exception):
    """Base class for every per-artifact failure."""


class ResolutionDisqualified(PluginFetchError):
    """A platform definitively cannot provide the artifact. Triggers fallback."""


class ResolutionReclassified(PluginFetchError):
    """A platform pointed somewhere else. Triggers fallback with a new candidate."""

    def __init__(self, platform, value: str, reason: str = ""):
        super().__init__(reason or f"reclassified as {platform.name}")
        self.platform = platform
        self.value = value


class PlatformsExhausted(PluginFetchError):
    """Every candidate was disqualified before anything was fetched."""


class ManualInstallRequired(PluginFetchError):
    """The only remaining candidate must be installed by a human."""

    def __init__(self, name: str, url: str):
        super().__init__(f"{name} must be installed manually from {url}")
        self.url = url


class FetchTransportFailure(PluginFetchError):
    """The download stream could not be opened."""


class FetchCopyFailure(PluginFetchError):
    """The download stream broke, or the file could not be written, mid-copy."""


class ActivationFailure(PluginFetchError):
    """The host could not load or enable the fetched plugin."""


class CommandRegistrationFailure(PluginFetchError):
    """The plugin's commands could not be registered with the host."""
