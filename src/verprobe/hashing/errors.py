"""Errors raised while computing checksums."""


class HashingError(Exception):
    """Base exception for checksum computation failures other than I/O errors."""


class InvalidPathError(HashingError, ValueError):
    """Raised when a file path is missing, empty, or whitespace-only."""


class UnknownAlgorithmError(HashingError, LookupError):
    """Raised when a hash algorithm name is not registered."""
