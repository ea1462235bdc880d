"""Tests for checksum computation."""

from __future__ import annotations

import hashlib
import io
from pathlib import Path

import pytest

from verprobe.hashing import (
    DEFAULT_ALGORITHM,
    InvalidPathError,
    UnknownAlgorithmError,
    available_algorithms,
    compute_digest,
    compute_stream_digest,
    get_algorithm,
    register_algorithm,
)
from verprobe.hashing import algorithms
from verprobe.hashing.algorithms import MD5, SHA1, SHA256, hashlib_algorithm


def test_compute_digest_matches_hashlib_sha256(tmp_path: Path) -> None:
    sample = tmp_path / "game.exe"
    payload = bytes(range(256)) * 40
    sample.write_bytes(payload)

    digest = compute_digest(sample)

    assert digest == hashlib.sha256(payload).digest()
    assert len(digest) == 32
    assert DEFAULT_ALGORITHM is SHA256


def test_compute_digest_streams_in_chunks(tmp_path: Path) -> None:
    sample = tmp_path / "data.bin"
    payload = b"0123456789" * 7
    sample.write_bytes(payload)

    assert compute_digest(sample, "sha1", chunk_size=3) == hashlib.sha1(payload).digest()


def test_compute_digest_accepts_string_paths(tmp_path: Path) -> None:
    sample = tmp_path / "data.bin"
    sample.write_bytes(b"abc")

    assert compute_digest(str(sample), MD5) == hashlib.md5(b"abc").digest()


def test_compute_digest_of_empty_file(tmp_path: Path) -> None:
    sample = tmp_path / "empty.bin"
    sample.write_bytes(b"")

    assert compute_digest(sample) == hashlib.sha256(b"").digest()


def test_single_byte_change_alters_digest(tmp_path: Path) -> None:
    original = tmp_path / "a.bin"
    mutated = tmp_path / "b.bin"
    payload = bytearray(b"\x00" * 10)
    original.write_bytes(bytes(payload))
    payload[5] ^= 0xFF
    mutated.write_bytes(bytes(payload))

    assert compute_digest(original) != compute_digest(mutated)


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
def test_blank_paths_raise_invalid_path(value: str | None) -> None:
    with pytest.raises(InvalidPathError):
        compute_digest(value)


def test_invalid_path_is_a_value_error_not_os_error() -> None:
    with pytest.raises(ValueError) as excinfo:
        compute_digest("")

    assert not isinstance(excinfo.value, OSError)


def test_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        compute_digest(tmp_path / "no" / "such" / "file")


def test_directory_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        compute_digest(tmp_path)


def test_compute_stream_digest_reads_remaining_content() -> None:
    stream = io.BytesIO(b"headerbody")
    stream.seek(6)

    assert compute_stream_digest(stream, SHA1) == hashlib.sha1(b"body").digest()


def test_compute_stream_digest_rejects_non_positive_chunk_size() -> None:
    with pytest.raises(ValueError):
        compute_stream_digest(io.BytesIO(b"x"), chunk_size=0)


@pytest.mark.parametrize("name", ["SHA256", "sha256", "sha-256", "Sha_256"])
def test_get_algorithm_normalises_names(name: str) -> None:
    assert get_algorithm(name) is SHA256


def test_get_algorithm_passes_instances_through() -> None:
    assert get_algorithm(SHA1) is SHA1


def test_unknown_algorithm_raises() -> None:
    with pytest.raises(UnknownAlgorithmError) as excinfo:
        get_algorithm("crc32")

    assert "SHA256" in str(excinfo.value)


def test_register_algorithm_makes_name_available(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(algorithms, "_REGISTRY", dict(algorithms._REGISTRY))
    custom = hashlib_algorithm("SHA3_512_TEST", "sha3_512")
    register_algorithm(custom)

    sample = tmp_path / "data.bin"
    sample.write_bytes(b"payload")

    assert "SHA3_512_TEST" in available_algorithms()
    assert compute_digest(sample, "sha3-512-test") == hashlib.sha3_512(b"payload").digest()
    with pytest.raises(ValueError):
        register_algorithm(custom)


def test_available_algorithms_include_defaults() -> None:
    names = available_algorithms()

    for expected in ("MD5", "SHA1", "SHA256", "SHA384", "SHA512"):
        assert expected in names
    assert "SHA3_512_TEST" not in names
