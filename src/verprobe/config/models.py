"""Configuration models describing verprobe settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from verprobe.detection.models import DEFAULT_AUTHOR
from verprobe.hashing import DEFAULT_CHUNK_SIZE, UnknownAlgorithmError, get_algorithm


class VerprobeBaseModel(BaseModel):
    """Shared configuration for verprobe Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class HashingSettings(VerprobeBaseModel):
    """Checksum computation options.

    Attributes:
        algorithm: Default hash algorithm for new digests and catalogs.
        chunk_size: Number of bytes read per hashing iteration.
    """

    algorithm: str = "SHA256"
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    @field_validator("algorithm")
    @classmethod
    def _registered(cls, value: str) -> str:
        try:
            return get_algorithm(value).name
        except UnknownAlgorithmError as exc:
            raise ValueError(str(exc)) from exc


class ArtifactSettings(VerprobeBaseModel):
    """Unknown-version artifact options.

    Attributes:
        enabled: Whether unknown versions produce an artifact file.
        output_dir: Directory receiving artifacts; the working directory when unset.
        encoding: Text encoding used for artifact files.
    """

    enabled: bool = True
    output_dir: Optional[str] = None
    encoding: str = "utf-8"


class ContactSettings(VerprobeBaseModel):
    """Contact details named when a version is unknown.

    Attributes:
        author: Author or contact string included in the warning.
    """

    author: str = DEFAULT_AUTHOR


class LoggingSettings(VerprobeBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(VerprobeBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class VerprobeConfig(VerprobeBaseModel):
    """Top-level configuration struct for verprobe."""

    hashing: HashingSettings = Field(default_factory=HashingSettings)
    artifacts: ArtifactSettings = Field(default_factory=ArtifactSettings)
    contact: ContactSettings = Field(default_factory=ContactSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "VerprobeBaseModel",
    "HashingSettings",
    "ArtifactSettings",
    "ContactSettings",
    "LoggingSettings",
    "CLIOptions",
    "VerprobeConfig",
]
