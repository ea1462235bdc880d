"""Data models describing detection inputs and outcomes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, field_validator

from .rendering import artifact_filename, byte_array_declaration, display_name_for

VersionT = TypeVar("VersionT")

DEFAULT_AUTHOR = "the plugin authors"


def label_name(label: Any) -> str:
    """Return the display form of a version label (enum member name or ``str``)."""
    if isinstance(label, Enum):
        return label.name
    return str(label)


class DetectionContext(BaseModel):
    """Contextual metadata for a single detection.

    Attributes:
        display_name: Base name of the inspected file, extension stripped.
        author: Author/contact string shown when a version is unknown.
        target: Optional program name selecting the target artifact variant.
        output_dir: Directory receiving the artifact; the working directory when unset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    display_name: str
    author: str = DEFAULT_AUTHOR
    target: Optional[str] = None
    output_dir: Optional[Path] = None

    @field_validator("target")
    @classmethod
    def _blank_target_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def for_file(
        cls,
        file_path: Union[str, "os.PathLike[str]"],
        **kwargs: Any,
    ) -> "DetectionContext":
        """Build a context whose display name is derived from ``file_path``."""
        return cls(display_name=display_name_for(file_path), **kwargs)

    @property
    def artifact_name(self) -> str:
        """Return the artifact file name for this context."""
        return artifact_filename(self.display_name, self.target)

    def artifact_path(self) -> Path:
        """Return the full path the artifact is written to."""
        directory = self.output_dir if self.output_dir is not None else Path.cwd()
        return directory / self.artifact_name


@dataclass(slots=True)
class DetectionResult(Generic[VersionT]):
    """Outcome of a single detection.

    Attributes:
        digest: Digest computed for the inspected file.
        algorithm: Display name of the hash algorithm used.
        display_name: Base name of the inspected file.
        version: Matched version label, or None when unknown.
        matched: Whether the digest was found in the catalog.
        artifact_path: Path of the artifact written for an unknown version.
        artifact_error: Description of a failed artifact write, if any.
    """

    digest: bytes
    algorithm: str
    display_name: str
    version: Optional[VersionT] = None
    matched: bool = False
    artifact_path: Optional[Path] = None
    artifact_error: Optional[str] = None

    @property
    def unknown(self) -> bool:
        """Return True when the digest matched no catalog entry."""
        return not self.matched

    @property
    def hex_digest(self) -> str:
        return self.digest.hex()

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready representation of the result."""
        return {
            "file": self.display_name,
            "algorithm": self.algorithm,
            "digest": self.hex_digest,
            "literal": byte_array_declaration(self.digest),
            "matched": self.matched,
            "version": label_name(self.version) if self.matched else None,
            "artifact": str(self.artifact_path) if self.artifact_path else None,
            "artifact_error": self.artifact_error,
        }


__all__ = [
    "DEFAULT_AUTHOR",
    "DetectionContext",
    "DetectionResult",
    "VersionT",
    "label_name",
]
