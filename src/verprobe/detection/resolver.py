"""Resolve digests against a catalog of known versions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from verprobe.hashing import DEFAULT_ALGORITHM, AlgorithmLike, get_algorithm

from .models import DetectionContext, DetectionResult, VersionT, label_name
from .rendering import format_artifact_line

LOGGER = logging.getLogger(__name__)

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class VersionResolver:
    """Match digests against a caller-owned catalog and report unknown versions."""

    def __init__(
        self,
        logger: Optional[LoggerLike] = None,
        *,
        write_artifacts: bool = True,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the resolver.

        Args:
            logger: Sink for detection events; defaults to this module's logger.
            write_artifacts: Whether unknown versions produce an artifact file.
            encoding: Text encoding used for artifact files.
        """
        self._logger = logger if logger is not None else LOGGER
        self._write_artifacts = write_artifacts
        self._encoding = encoding

    def resolve(
        self,
        digest: bytes,
        catalog: Mapping[bytes, VersionT],
        context: DetectionContext,
        *,
        algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    ) -> DetectionResult[VersionT]:
        """Return the catalog entry matching ``digest``.

        The catalog is only read. On a miss the result is unknown and, unless
        artifacts are disabled, a version hash artifact is written.

        Args:
            digest: Digest of the inspected file.
            catalog: Mapping of known digests to version labels.
            context: Display name, contact, and artifact placement details.
            algorithm: Algorithm instance or registered name that produced ``digest``.

        Raises:
            UnknownAlgorithmError: If ``algorithm`` names no registered algorithm.

        Returns:
            DetectionResult: Matched label, or an unknown outcome.
        """
        algorithm_name = get_algorithm(algorithm).name
        digest = bytes(digest)
        for known, label in catalog.items():
            if bytes(known) == digest:
                self._logger.info(
                    "%s version detected: %s", context.display_name, label_name(label)
                )
                return DetectionResult(
                    digest=digest,
                    algorithm=algorithm_name,
                    display_name=context.display_name,
                    version=label,
                    matched=True,
                )

        result: DetectionResult[VersionT] = DetectionResult(
            digest=digest,
            algorithm=algorithm_name,
            display_name=context.display_name,
        )
        if self._write_artifacts:
            self._record_unknown(result, context)
        if result.artifact_path is not None:
            self._logger.warning(
                "Unknown version! Please submit the %s file to the plugin authors %s.",
                result.artifact_path.name,
                context.author,
            )
        else:
            self._logger.warning(
                "Unknown version! Please send the %s checksum hash %s of %s "
                "to the plugin authors %s.",
                algorithm_name,
                result.hex_digest,
                context.display_name,
                context.author,
            )
        return result

    def _record_unknown(self, result: DetectionResult, context: DetectionContext) -> None:
        """Write the artifact, recording rather than raising write failures."""
        path = context.artifact_path()
        line = format_artifact_line(
            context.display_name,
            result.algorithm,
            result.digest,
            target=context.target,
        )
        try:
            write_artifact(path, line, encoding=self._encoding)
        except OSError as exc:
            result.artifact_error = str(exc)
            self._logger.error("Could not write version hash artifact %s: %s", path, exc)
            return
        result.artifact_path = path


def write_artifact(path: Path, line: str, *, encoding: str = "utf-8") -> None:
    """Write ``line`` to ``path``, replacing any previous content."""
    with path.open("w", encoding=encoding, newline="\n") as handle:
        handle.write(line + "\n")


def resolve_version(
    digest: bytes,
    catalog: Mapping[bytes, VersionT],
    context: DetectionContext,
    *,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    logger: Optional[LoggerLike] = None,
) -> DetectionResult[VersionT]:
    """Resolve ``digest`` with a default-configured :class:`VersionResolver`."""
    return VersionResolver(logger).resolve(digest, catalog, context, algorithm=algorithm)


__all__ = ["LoggerLike", "VersionResolver", "resolve_version", "write_artifact"]
