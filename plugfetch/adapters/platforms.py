"""
One resolver per platform.

API-backed resolvers raise ResolutionDisqualified / ResolutionReclassified
internally; `ApiPlatformResolver.resolve` turns those into outcomes so that
nothing network-related ever reaches the cascade as an exception.
"""
import json
from abc import ABC, abstractmethod
from typing import Any

from plugfetch.adapters.http_client import ApiClient
from plugfetch.internal.constants import (
    BUKKIT_LATEST_URL,
    MODRINTH_LOADERS,
    MODRINTH_VERSIONS_URL,
    SPIGET_DOWNLOAD_SEGMENT,
    SPIGET_RESOURCE_URL,
)
from plugfetch.kernel.artifacts import (
    Disqualified,
    ManualInstall,
    Outcome,
    Platform,
    PlatformResolver,
    Reclassified,
    Resolved,
    ResolveContext,
)
from plugfetch.kernel.errors import ResolutionDisqualified, ResolutionReclassified


class ApiPlatformResolver(ABC):
    def __init__(self, client: ApiClient):
        self.client = client

    def resolve(self, candidate: str, context: ResolveContext) -> Outcome:
        try:
            return Resolved(self._lookup(candidate, context))
        except ResolutionReclassified as e:
            return Reclassified(e.platform, e.value, str(e))
        except ResolutionDisqualified as e:
            return Disqualified(str(e))

    @abstractmethod
    def _lookup(self, candidate: str, context: ResolveContext) -> str:
        """
        Returns the download URL or raises one of the resolution errors.
        """


class ModrinthResolver(ApiPlatformResolver):
    """
    Resolves through the Labrinth API, filtered to compatible loaders and
    the host's game version. The first file of the first returned version
    wins; no "latest" ranking is applied.
    """

    def _lookup(self, candidate: str, context: ResolveContext) -> str:
        url = MODRINTH_VERSIONS_URL.format(project=candidate)
        params = {
            "loaders": json.dumps(list(MODRINTH_LOADERS), separators=(",", ":")),
            "game_versions": json.dumps([context.host_version.game_version]),
        }
        versions = self.client.get_json(url, params=params)
        try:
            return str(versions[0]["files"][0]["url"])
        except (IndexError, KeyError, TypeError) as e:
            raise ResolutionDisqualified(
                f"no compatible version for {context.host_version}"
            ) from e


class SpigotResolver(ApiPlatformResolver):
    """
    Resolves through the Spiget API. Premium resources are disqualified;
    external resources are reclassified by the shape of their external URL.
    """

    def _lookup(self, candidate: str, context: ResolveContext) -> str:
        url = SPIGET_RESOURCE_URL.format(resource=candidate)
        resource = self.client.get_json(url)

        if _flag(resource, "premium"):
            raise ResolutionDisqualified("resource is premium")

        if _flag(resource, "external"):
            try:
                external_url = str(resource["file"]["externalUrl"])
            except (KeyError, TypeError) as e:
                raise ResolutionDisqualified("external resource without a URL") from e
            if external_url.endswith(context.extension):
                raise ResolutionReclassified(Platform.EXTERNAL, external_url, "resource is hosted externally")
            raise ResolutionReclassified(Platform.MANUAL, external_url, "resource must be downloaded manually")

        return url + SPIGET_DOWNLOAD_SEGMENT


def _flag(payload: Any, key: str) -> bool:
    try:
        value = payload[key]
    except (KeyError, TypeError) as e:
        raise ResolutionDisqualified(f"malformed resource: missing {key!r}") from e
    if not isinstance(value, bool):
        raise ResolutionDisqualified(f"malformed resource: {key!r} is not a boolean")
    return value


class BukkitResolver:
    """Projects the slug onto the "latest file" URL; failures surface at fetch time."""

    def resolve(self, candidate: str, context: ResolveContext) -> Outcome:
        return Resolved(BUKKIT_LATEST_URL.format(project=candidate))


class ExternalResolver:
    def resolve(self, candidate: str, context: ResolveContext) -> Outcome:
        return Resolved(candidate)


class ManualResolver:
    def resolve(self, candidate: str, context: ResolveContext) -> Outcome:
        return ManualInstall(candidate)


def default_resolvers(client: ApiClient) -> dict[Platform, PlatformResolver]:
    return {
        Platform.MODRINTH: ModrinthResolver(client),
        Platform.SPIGOT: SpigotResolver(client),
        Platform.BUKKIT: BukkitResolver(),
        Platform.EXTERNAL: ExternalResolver(),
        Platform.MANUAL: ManualResolver(),
    }
