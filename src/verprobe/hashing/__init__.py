"""Checksum computation for files on disk."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Union

from .algorithms import (
    DEFAULT_ALGORITHM,
    AlgorithmLike,
    HashAlgorithm,
    available_algorithms,
    get_algorithm,
    register_algorithm,
)
from .errors import HashingError, InvalidPathError, UnknownAlgorithmError

DEFAULT_CHUNK_SIZE = 1024 * 1024

PathInput = Union[str, "os.PathLike[str]", None]


def validate_path(file_path: PathInput) -> Path:
    """Return ``file_path`` as a :class:`Path`, rejecting blank input.

    Args:
        file_path: Candidate path supplied by the caller.

    Returns:
        Path: The path, unchanged apart from the type conversion.

    Raises:
        InvalidPathError: If the path is None, empty, or whitespace-only.
    """
    if file_path is None:
        raise InvalidPathError("file_path is None or an empty string")
    raw = os.fsdecode(file_path)
    if not raw.strip():
        raise InvalidPathError("file_path is None or an empty string")
    return Path(raw)


def compute_stream_digest(
    stream: BinaryIO,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """Digest everything remaining in a binary stream.

    Args:
        stream: Readable binary stream positioned at the first byte to hash.
        algorithm: Algorithm instance or registered algorithm name.
        chunk_size: Number of bytes read per iteration.

    Returns:
        bytes: Digest of the stream content.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be greater than zero.")
    hasher = get_algorithm(algorithm).new()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        hasher.update(chunk)
    return hasher.digest()


def compute_digest(
    file_path: PathInput,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """Compute the checksum of a file without loading it into memory at once.

    The file is opened read-only and closed on every exit path.

    Args:
        file_path: Path to an existing, readable file.
        algorithm: Algorithm instance or registered algorithm name.
        chunk_size: Number of bytes read per iteration.

    Returns:
        bytes: Digest of the file content.

    Raises:
        InvalidPathError: If the path is None, empty, or whitespace-only.
        UnknownAlgorithmError: If ``algorithm`` names no registered algorithm.
        OSError: If the file cannot be opened or read.
    """
    path = validate_path(file_path)
    resolved = get_algorithm(algorithm)
    with path.open("rb") as stream:
        return compute_stream_digest(stream, resolved, chunk_size=chunk_size)


__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_CHUNK_SIZE",
    "AlgorithmLike",
    "HashAlgorithm",
    "HashingError",
    "InvalidPathError",
    "PathInput",
    "UnknownAlgorithmError",
    "available_algorithms",
    "compute_digest",
    "compute_stream_digest",
    "get_algorithm",
    "register_algorithm",
    "validate_path",
]
