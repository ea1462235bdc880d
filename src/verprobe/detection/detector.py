"""Path-level version detection combining checksum and catalog lookup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from verprobe.hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    AlgorithmLike,
    InvalidPathError,
    PathInput,
    compute_digest,
    get_algorithm,
    validate_path,
)
from verprobe.hashing.algorithms import SHA256

from .models import DEFAULT_AUTHOR, DetectionContext, DetectionResult, VersionT
from .resolver import LoggerLike, VersionResolver

LOGGER = logging.getLogger(__name__)


def detect_version(
    file_path: PathInput,
    catalog: Mapping[bytes, VersionT],
    *,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    author: str = DEFAULT_AUTHOR,
    target: Optional[str] = None,
    output_dir: Optional[Path] = None,
    logger: Optional[LoggerLike] = None,
    write_artifacts: bool = True,
    encoding: str = "utf-8",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> DetectionResult[VersionT]:
    """Detect which catalogued version a file corresponds to.

    Args:
        file_path: Path to the file to identify.
        catalog: Mapping of known digests to version labels.
        algorithm: Algorithm instance or registered name used for the digest.
        author: Author/contact string named in the unknown-version warning.
        target: Optional program name selecting the target artifact variant.
        output_dir: Directory for the artifact; the working directory when None.
        logger: Sink for detection events.
        write_artifacts: Whether unknown versions produce an artifact file.
        encoding: Text encoding used for artifact files.
        chunk_size: Number of bytes read per hashing iteration.

    Returns:
        DetectionResult: Matched label, or an unknown outcome.

    Raises:
        InvalidPathError: If the path is None, empty, or whitespace-only.
        UnknownAlgorithmError: If ``algorithm`` names no registered algorithm.
        OSError: If the file cannot be opened or read.
    """
    sink = logger if logger is not None else LOGGER
    try:
        path = validate_path(file_path)
    except InvalidPathError as exc:
        sink.error("Unknown version: %s", exc)
        raise

    resolved = get_algorithm(algorithm)
    digest = compute_digest(path, resolved, chunk_size=chunk_size)
    context = DetectionContext.for_file(
        path, author=author, target=target, output_dir=output_dir
    )
    resolver = VersionResolver(sink, write_artifacts=write_artifacts, encoding=encoding)
    return resolver.resolve(digest, catalog, context, algorithm=resolved.name)


def detect_sha256_version(
    file_path: PathInput,
    catalog: Mapping[bytes, VersionT],
    **kwargs,
) -> DetectionResult[VersionT]:
    """Detect a version using SHA256 digests; see :func:`detect_version`."""
    return detect_version(file_path, catalog, algorithm=SHA256, **kwargs)


__all__ = ["detect_sha256_version", "detect_version"]
