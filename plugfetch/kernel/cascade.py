"""
This module drives a single artifact through the platform fallback cascade.

Candidates are attempted strictly in platform priority order. After every
disqualification or reclassification the scan restarts from the top, until a
platform yields a fetched file, a manual-install notice, or nothing is left.
"""
from pathlib import Path
from typing import Mapping, Optional, Protocol

from plugfetch.internal.logging import get_logger
from plugfetch.kernel.artifacts import (
    Artifact,
    CascadeResult,
    CascadeState,
    Disqualified,
    HostVersion,
    ManualInstall,
    Platform,
    PlatformResolver,
    Reclassified,
    Resolved,
    ResolveContext,
)
from plugfetch.kernel.errors import (
    FetchCopyFailure,
    FetchTransportFailure,
    ManualInstallRequired,
    PlatformsExhausted,
)

logger = get_logger(__name__)


class Fetcher(Protocol):
    def fetch(self, url: str, destination: Path) -> int:
        ...


class Activator(Protocol):
    def activate(self, artifact: Artifact) -> bool:
        ...


class CascadeEngine:
    """
    Resolves, fetches and optionally activates one artifact at a time.

    The engine holds no per-artifact state, so one instance can serve every
    worker of a batch concurrently.
    """

    def __init__(
        self,
        resolvers: Mapping[Platform, PlatformResolver],
        fetcher: Fetcher,
        host_version: HostVersion,
        activation: Optional[Activator] = None,
    ):
        missing = [p.name for p in Platform if p not in resolvers]
        if missing:
            raise ValueError(f"No resolver for platforms: {', '.join(missing)}")
        self.resolvers = resolvers
        self.fetcher = fetcher
        self.host_version = host_version
        self.activation = activation

    def run(self, artifact: Artifact) -> CascadeResult:
        result = CascadeResult(name=artifact.name, state=CascadeState.FAILED, destination=artifact.destination)
        context = ResolveContext(artifact_name=artifact.name, host_version=self.host_version)
        log = logger.bind(artifact=artifact.name)

        while True:
            platform = artifact.next_platform()
            if platform is None:
                log.error("Ran out of platforms!")
                result.error = PlatformsExhausted(f"no platform could provide {artifact.name}")
                return result

            candidate = artifact.candidates[platform]
            outcome = self.resolvers[platform].resolve(candidate, context)

            if isinstance(outcome, Disqualified):
                self._disqualify(artifact, platform, outcome.reason, result)
                continue

            if isinstance(outcome, Reclassified):
                del artifact.candidates[platform]
                added = outcome.platform not in artifact.candidates
                if added:
                    artifact.candidates[outcome.platform] = outcome.value
                result.attempts.append((platform, f"reclassified as {outcome.platform.name}"))
                log.warning(
                    "Platform reclassified",
                    platform=platform.name,
                    new_platform=outcome.platform.name,
                    url=outcome.value,
                    added=added,
                    reason=outcome.reason,
                )
                continue

            if isinstance(outcome, ManualInstall):
                result.attempts.append((platform, "manual install"))
                log.warning("Please install this plugin manually", url=outcome.url)
                result.state = CascadeState.MANUAL_ONLY
                result.platform = platform
                result.url = outcome.url
                result.error = ManualInstallRequired(artifact.name, outcome.url)
                return result

            if not isinstance(outcome, Resolved):
                raise TypeError(f"Unexpected outcome from {platform.name}: {outcome!r}")

            try:
                self.fetcher.fetch(outcome.url, artifact.destination)
            except (FetchTransportFailure, FetchCopyFailure) as e:
                self._disqualify(artifact, platform, str(e), result)
                continue

            result.attempts.append((platform, "fetched"))
            result.state = CascadeState.SUCCEEDED
            result.platform = platform
            result.url = outcome.url
            log.info("Successfully downloaded", platform=platform.name, path=str(artifact.destination))
            break

        if artifact.activate_after_fetch and self.activation is not None:
            result.activated = self.activation.activate(artifact)
        return result

    def _disqualify(self, artifact: Artifact, platform: Platform, reason: str, result: CascadeResult) -> None:
        del artifact.candidates[platform]
        result.attempts.append((platform, reason))
        logger.warning("Platform disqualified", artifact=artifact.name, platform=platform.name, reason=reason)
