"""
Core data model for plugin resolution.

Defines the platforms an artifact can come from, the artifact itself, the
outcomes a platform resolver may return, and the per-artifact result. These
are pure data contracts; resolution logic lives in the cascade engine and
the platform adapters.
"""
import enum
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Union

from plugfetch.internal.constants import ARTIFACT_EXTENSION


class Platform(enum.Enum):
    """
    Platforms a plugin can be fetched from, declared in priority order.
    """
    MODRINTH = 1  # project ID or slug, e.g. "lzjYdd5h" or "personal-phantoms"
    SPIGOT = 2    # numeric resource ID, e.g. "106381"
    BUKKIT = 3    # project ID or slug
    EXTERNAL = 4  # direct-download URL
    MANUAL = 5    # URL a human can download the plugin from

    @classmethod
    def ordered(cls) -> list["Platform"]:
        return sorted(cls, key=lambda p: p.value)

    @classmethod
    def parse(cls, text: str) -> "Platform":
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown platform: {text!r}") from None


# Reclassification can only ever add one of these.
RECLASSIFY_TARGETS = (Platform.EXTERNAL, Platform.MANUAL)


@dataclass
class Artifact:
    """
    One plugin to resolve and fetch.

    `candidates` is mutated while the artifact's cascade runs: disqualified
    platforms are removed and reclassified ones are added.
    """
    name: str
    candidates: dict[Platform, str]
    destination: Path
    activate_after_fetch: bool = True

    def __post_init__(self):
        if not self.name:
            raise ValueError("name cannot be empty")
        self.destination = Path(self.destination)

    def next_platform(self) -> Optional[Platform]:
        return next((p for p in Platform.ordered() if p in self.candidates), None)


# ---------------------------------------------------------------------
# Host version
# ---------------------------------------------------------------------

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?")


@dataclass(frozen=True)
class HostVersion:
    major: int
    minor: int
    patch: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> "HostVersion":
        """
        Parses `major.minor[.patch][-suffix]`, e.g. "1.20.4-R0.1-SNAPSHOT".
        """
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise ValueError(f"Not a host version: {text!r}")
        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch) if patch is not None else None)

    @property
    def game_version(self) -> str:
        if self.patch is None:
            return f"{self.major}.{self.minor}"
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return self.game_version


@dataclass(frozen=True)
class ResolveContext:
    artifact_name: str
    host_version: HostVersion
    extension: str = ARTIFACT_EXTENSION


# ---------------------------------------------------------------------
# Resolver outcomes
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Resolved:
    url: str


@dataclass(frozen=True)
class Disqualified:
    reason: str


@dataclass(frozen=True)
class Reclassified:
    platform: Platform
    value: str
    reason: str = ""

    def __post_init__(self):
        if self.platform not in RECLASSIFY_TARGETS:
            raise ValueError(f"Cannot reclassify into {self.platform.name}")


@dataclass(frozen=True)
class ManualInstall:
    url: str


Outcome = Union[Resolved, Disqualified, Reclassified, ManualInstall]


class PlatformResolver(Protocol):
    """
    The interface (port) for one platform's resolution strategy.
    """

    def resolve(self, candidate: str, context: ResolveContext) -> Outcome:
        """
        Turns a candidate identifier or URL into an outcome.

        Implementations must not raise for network or payload problems;
        those are reported as `Disqualified`.
        """
        ...


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------

class CascadeState(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    MANUAL_ONLY = "manual_only"


@dataclass
class CascadeResult:
    name: str
    state: CascadeState
    destination: Path
    platform: Optional[Platform] = None
    url: Optional[str] = None
    attempts: list[tuple[Platform, str]] = field(default_factory=list)
    activated: bool = False
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.state is CascadeState.SUCCEEDED
