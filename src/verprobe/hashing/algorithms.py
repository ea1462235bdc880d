"""Hash algorithm abstractions and the registry of supported algorithms."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Protocol, Union, runtime_checkable

from .errors import UnknownAlgorithmError


@runtime_checkable
class Hasher(Protocol):
    """Incremental hash object, as returned by the :mod:`hashlib` constructors."""

    def update(self, data: bytes, /) -> None: ...

    def digest(self) -> bytes: ...


@runtime_checkable
class HashAlgorithm(Protocol):
    """Capability describing a hash function that can digest a byte stream.

    Attributes:
        name: Display name used in logs and version hash artifacts.
        digest_size: Length in bytes of the digests produced.
    """

    name: str
    digest_size: int

    def new(self) -> Hasher:
        """Return a fresh incremental hasher."""
        ...


@dataclass(frozen=True, slots=True)
class HashlibAlgorithm:
    """Hash algorithm backed by a :mod:`hashlib` constructor.

    Attributes:
        name: Display name used in logs and version hash artifacts.
        digest_size: Length in bytes of the digests produced.
        factory: Zero-argument callable returning a new hasher.
    """

    name: str
    digest_size: int
    factory: Callable[[], Hasher]

    def new(self) -> Hasher:
        return self.factory()


def hashlib_algorithm(name: str, hashlib_name: str) -> HashlibAlgorithm:
    """Build a :class:`HashlibAlgorithm` for a name understood by ``hashlib.new``.

    Args:
        name: Display name of the algorithm.
        hashlib_name: Identifier accepted by :func:`hashlib.new`.

    Returns:
        HashlibAlgorithm: Algorithm wrapping the hashlib constructor.
    """
    factory = partial(hashlib.new, hashlib_name)
    return HashlibAlgorithm(name=name, digest_size=factory().digest_size, factory=factory)


MD5 = hashlib_algorithm("MD5", "md5")
SHA1 = hashlib_algorithm("SHA1", "sha1")
SHA256 = hashlib_algorithm("SHA256", "sha256")
SHA384 = hashlib_algorithm("SHA384", "sha384")
SHA512 = hashlib_algorithm("SHA512", "sha512")
SHA3_256 = hashlib_algorithm("SHA3_256", "sha3_256")
BLAKE2B = hashlib_algorithm("BLAKE2b", "blake2b")

DEFAULT_ALGORITHM: HashAlgorithm = SHA256

AlgorithmLike = Union[str, HashAlgorithm]

_REGISTRY: Dict[str, HashAlgorithm] = {}


def _normalise_name(name: str) -> str:
    return name.strip().upper().replace("-", "").replace("_", "")


def register_algorithm(algorithm: HashAlgorithm, *, replace: bool = False) -> None:
    """Make an algorithm available by name to :func:`get_algorithm`.

    Args:
        algorithm: Algorithm implementation to register.
        replace: Allow replacing an algorithm already registered under the same name.

    Raises:
        ValueError: If the name is taken and ``replace`` is False.
    """
    key = _normalise_name(algorithm.name)
    if key in _REGISTRY and not replace:
        raise ValueError(f"Hash algorithm {algorithm.name!r} is already registered.")
    _REGISTRY[key] = algorithm


def get_algorithm(algorithm: AlgorithmLike) -> HashAlgorithm:
    """Return the algorithm registered under a name, or the algorithm itself.

    Names are matched case-insensitively, ignoring ``-`` and ``_`` so that
    ``sha-256`` and ``SHA256`` resolve to the same implementation.

    Raises:
        UnknownAlgorithmError: If no algorithm is registered under the name.
    """
    if not isinstance(algorithm, str):
        return algorithm
    try:
        return _REGISTRY[_normalise_name(algorithm)]
    except KeyError:
        known = ", ".join(available_algorithms())
        raise UnknownAlgorithmError(
            f"Unknown hash algorithm {algorithm!r}; expected one of: {known}."
        ) from None


def available_algorithms() -> List[str]:
    """Return the display names of all registered algorithms."""
    return sorted(algorithm.name for algorithm in _REGISTRY.values())


for _algorithm in (MD5, SHA1, SHA256, SHA384, SHA512, SHA3_256, BLAKE2B):
    register_algorithm(_algorithm)
del _algorithm


__all__ = [
    "AlgorithmLike",
    "BLAKE2B",
    "DEFAULT_ALGORITHM",
    "HashAlgorithm",
    "Hasher",
    "HashlibAlgorithm",
    "MD5",
    "SHA1",
    "SHA256",
    "SHA384",
    "SHA3_256",
    "SHA512",
    "available_algorithms",
    "get_algorithm",
    "hashlib_algorithm",
    "register_algorithm",
]
