"""Catalog model mapping version labels to known digests."""

from __future__ import annotations

from typing import Dict, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from verprobe.detection.rendering import parse_digest_text
from verprobe.hashing import UnknownAlgorithmError, get_algorithm

from .errors import CatalogError


class VersionCatalog(BaseModel):
    """Known versions of a program keyed by label.

    Attributes:
        algorithm: Name of the hash algorithm the digests were computed with.
        versions: Mapping of version label to lowercase hex digest.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    algorithm: str = "SHA256"
    versions: Dict[str, str] = Field(default_factory=dict)

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        try:
            return get_algorithm(value).name
        except UnknownAlgorithmError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("versions", mode="before")
    @classmethod
    def _normalise_digests(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        normalised: Dict[str, str] = {}
        for label, text in value.items():
            if not isinstance(label, str):
                raise ValueError(
                    f"Version label {label!r} is not text; quote it in the catalog file."
                )
            if isinstance(text, (bytes, bytearray)):
                normalised[label] = bytes(text).hex()
                continue
            normalised[label] = parse_digest_text(str(text)).hex()
        return normalised

    @model_validator(mode="after")
    def _consistent_digests(self) -> "VersionCatalog":
        size = get_algorithm(self.algorithm).digest_size
        seen: Dict[str, str] = {}
        for label, digest in self.versions.items():
            if len(digest) != size * 2:
                raise ValueError(
                    f"Digest for {label} has {len(digest) // 2} bytes; "
                    f"{self.algorithm} digests have {size}."
                )
            if digest in seen:
                raise ValueError(f"Versions {seen[digest]} and {label} share the same digest.")
            seen[digest] = label
        return self

    def as_mapping(self) -> Dict[bytes, str]:
        """Return the digest-to-label mapping consumed by the resolver."""
        return {bytes.fromhex(digest): label for label, digest in self.versions.items()}

    def digest_for(self, label: str) -> bytes:
        """Return the digest recorded for ``label``.

        Raises:
            CatalogError: If the label is not catalogued.
        """
        try:
            return bytes.fromhex(self.versions[label])
        except KeyError:
            raise CatalogError(f"Version {label!r} is not in the catalog.") from None

    def add(self, label: str, digest: Union[bytes, str], *, replace: bool = False) -> None:
        """Record a new version.

        Args:
            label: Version label to add.
            digest: Digest bytes, hex text, or a byte-array literal.
            replace: Allow overwriting an existing label.

        Raises:
            CatalogError: If the label exists, the digest text is invalid, or the
                digest conflicts with the catalog's algorithm or entries.
        """
        if label in self.versions and not replace:
            raise CatalogError(f"Version {label!r} is already in the catalog.")
        updated: Dict[str, Union[bytes, str]] = dict(self.versions)
        updated[label] = digest
        try:
            candidate = VersionCatalog.model_validate(
                {"algorithm": self.algorithm, "versions": updated}
            )
        except ValidationError as exc:
            raise CatalogError(str(exc)) from exc
        self.versions = candidate.versions


__all__ = ["VersionCatalog"]
