"""
Batch configuration file loading.

The file is JSON, read once at startup:

    {"artifacts": [{"name": "PersonalPhantoms",
                    "platforms": {"modrinth": "lzjYdd5h", "spigot": "106381"},
                    "enable_after_download": true}]}
"""
import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from plugfetch.internal.constants import ARTIFACT_EXTENSION
from plugfetch.kernel.artifacts import Artifact, Platform


class ConfigError(Exception):
    pass


class ArtifactConfig(BaseModel):
    name: str = Field(min_length=1)
    platforms: dict[str, str]
    enable_after_download: bool = True
    path: Optional[Path] = None

    @field_validator("platforms")
    @classmethod
    def _check_platforms(cls, value: dict[str, str]) -> dict[str, str]:
        if not value:
            raise ValueError("at least one platform is required")
        seen = set()
        for key, candidate in value.items():
            platform = Platform.parse(key)
            if platform in seen:
                raise ValueError(f"platform {platform.name} listed more than once")
            if not candidate.strip():
                raise ValueError(f"empty value for platform {platform.name}")
            seen.add(platform)
        return value

    def candidates(self) -> dict[Platform, str]:
        return {Platform.parse(key): value.strip() for key, value in self.platforms.items()}

    def to_artifact(self, dest_dir: Path) -> Artifact:
        return Artifact(
            name=self.name,
            candidates=self.candidates(),
            destination=self.path or Path(dest_dir) / f"{self.name}{ARTIFACT_EXTENSION}",
            activate_after_fetch=self.enable_after_download,
        )


class BatchConfig(BaseModel):
    artifacts: list[ArtifactConfig]

    def to_artifacts(self, dest_dir: Path) -> list[Artifact]:
        return [a.to_artifact(dest_dir) for a in self.artifacts]


def load_batch_config(path: Path) -> BatchConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Batch file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Batch file is not valid JSON: {path}: {e}") from e
    try:
        return BatchConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid batch file {path}:\n{e}") from e
