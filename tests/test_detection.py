"""Tests for version resolution and path-level detection."""

from __future__ import annotations

import enum
import hashlib
import logging
import re
from pathlib import Path

import pytest

from verprobe.detection import (
    DetectionContext,
    VersionResolver,
    detect_sha256_version,
    detect_version,
    parse_byte_array_declaration,
    resolve_version,
)
from verprobe.hashing import InvalidPathError, UnknownAlgorithmError
from verprobe.hashing.algorithms import MD5


class GameVersion(enum.Enum):
    V1_0 = 1
    V1_1 = 2


def _sample(tmp_path: Path, payload: bytes = b"0123456789") -> Path:
    path = tmp_path / "file.exe"
    path.write_bytes(payload)
    return path


def _catalog_for(payload: bytes) -> dict[bytes, GameVersion]:
    return {hashlib.sha256(payload).digest(): GameVersion.V1_0}


def test_known_file_resolves_to_label_without_artifact(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="verprobe")
    sample = _sample(tmp_path)

    result = detect_version(sample, _catalog_for(b"0123456789"), output_dir=tmp_path)

    assert result.matched is True
    assert result.unknown is False
    assert result.version is GameVersion.V1_0
    assert result.artifact_path is None
    assert not (tmp_path / "file_VersionHash.log").exists()
    assert "file version detected: V1_0" in caplog.text


def test_flipped_byte_is_unknown_and_writes_artifact(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="verprobe")
    sample = _sample(tmp_path, b"0123456789")
    catalog = _catalog_for(b"0123456789")
    sample.write_bytes(b"0123456788")

    result = detect_version(
        sample, catalog, author="Jane <jane@example.com>", output_dir=tmp_path
    )

    assert result.unknown is True
    assert result.version is None
    artifact = tmp_path / "file_VersionHash.log"
    assert result.artifact_path == artifact
    text = artifact.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert len(text.splitlines()) == 1
    assert re.match(
        r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}Z\] "
        r"file's SHA256 checksum hash: new byte\[32\] \{ ",
        text,
    )
    assert len(re.findall(r"0x[0-9A-F]{2}", text)) == 32
    assert parse_byte_array_declaration(text) == hashlib.sha256(b"0123456788").digest()
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "file_VersionHash.log" in warnings[0].getMessage()
    assert "Jane <jane@example.com>" in warnings[0].getMessage()


def test_empty_catalog_is_always_unknown(tmp_path: Path) -> None:
    sample = _sample(tmp_path)

    result = detect_version(sample, {}, output_dir=tmp_path)

    assert result.unknown is True
    assert (tmp_path / "file_VersionHash.log").exists()


def test_rerun_overwrites_artifact(tmp_path: Path) -> None:
    sample = _sample(tmp_path, b"first")
    detect_version(sample, {}, output_dir=tmp_path)
    sample.write_bytes(b"second")

    detect_version(sample, {}, output_dir=tmp_path)

    text = (tmp_path / "file_VersionHash.log").read_text(encoding="utf-8")
    assert len(text.splitlines()) == 1
    assert parse_byte_array_declaration(text) == hashlib.sha256(b"second").digest()


def test_invalid_path_logs_error_without_io(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(InvalidPathError):
        detect_version("  ", {})

    assert list(tmp_path.iterdir()) == []
    assert any(record.levelno == logging.ERROR for record in caplog.records)


def test_missing_file_raises_os_error_and_writes_nothing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        detect_version("/no/such/file", {}, output_dir=tmp_path)

    assert list(tmp_path.iterdir()) == []


def test_artifact_defaults_to_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    sample = _sample(source_dir)
    monkeypatch.chdir(tmp_path)

    result = detect_version(sample, {})

    assert (tmp_path / "file_VersionHash.log").exists()
    assert result.artifact_path is not None
    assert result.artifact_path.name == "file_VersionHash.log"


def test_target_variant_names_artifact_after_program(tmp_path: Path) -> None:
    sample = _sample(tmp_path)

    result = detect_version(sample, {}, target="RE4R", output_dir=tmp_path)

    artifact = tmp_path / "re4r_version.log"
    assert result.artifact_path == artifact
    assert "private static readonly byte[] re4r??_00000000 = new byte[32]" in artifact.read_text(
        encoding="utf-8"
    )


def test_artifact_write_failure_does_not_mask_result(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="verprobe")
    sample = _sample(tmp_path)
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")

    result = detect_version(sample, {}, output_dir=blocker)

    assert result.unknown is True
    assert result.artifact_path is None
    assert result.artifact_error
    assert any(record.levelno == logging.ERROR for record in caplog.records)
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "submit the" not in warnings[0].getMessage()
    assert result.hex_digest in warnings[0].getMessage()


def test_artifacts_can_be_disabled(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="verprobe")
    sample = _sample(tmp_path)

    result = detect_version(sample, {}, output_dir=tmp_path, write_artifacts=False)

    assert result.unknown is True
    assert not (tmp_path / "file_VersionHash.log").exists()
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "VersionHash.log" not in warnings[0].getMessage()
    assert result.hex_digest in warnings[0].getMessage()


def test_pluggable_algorithm_is_named_in_artifact(tmp_path: Path) -> None:
    sample = _sample(tmp_path)
    catalog = {hashlib.md5(b"0123456789").digest(): "md5-build"}

    matched = detect_version(sample, catalog, algorithm="md5", output_dir=tmp_path)
    missed = detect_version(sample, {}, algorithm="sha1", output_dir=tmp_path)

    assert matched.version == "md5-build"
    assert matched.algorithm == "MD5"
    text = (tmp_path / "file_VersionHash.log").read_text(encoding="utf-8")
    assert "file's SHA1 checksum hash: new byte[20]" in text
    assert missed.algorithm == "SHA1"


def test_detect_sha256_version_uses_sha256(tmp_path: Path) -> None:
    sample = _sample(tmp_path)

    result = detect_sha256_version(sample, _catalog_for(b"0123456789"), output_dir=tmp_path)

    assert result.version is GameVersion.V1_0
    assert result.algorithm == "SHA256"


def test_resolver_compares_bytes_like_keys_exactly() -> None:
    digest = hashlib.sha256(b"x").digest()
    context = DetectionContext(display_name="x")
    catalog = {
        memoryview(digest[:-1]): GameVersion.V1_1,
        memoryview(digest): GameVersion.V1_0,
    }

    result = VersionResolver(write_artifacts=False).resolve(digest, catalog, context)

    assert result.version is GameVersion.V1_0


def test_resolver_uses_injected_logger(tmp_path: Path) -> None:
    records: list[logging.LogRecord] = []

    class _Collector(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    sink = logging.getLogger("tests.injected")
    sink.propagate = False
    sink.setLevel(logging.DEBUG)
    sink.addHandler(_Collector())
    digest = hashlib.sha256(b"x").digest()
    context = DetectionContext(display_name="x", output_dir=tmp_path)

    result = resolve_version(digest, {digest: "1.0"}, context, logger=sink)

    assert result.version == "1.0"
    assert [record.levelno for record in records] == [logging.INFO]
    assert records[0].getMessage() == "x version detected: 1.0"


def test_result_payload_is_json_ready(tmp_path: Path) -> None:
    sample = _sample(tmp_path)

    payload = detect_version(sample, {}, output_dir=tmp_path).to_payload()

    assert payload["matched"] is False
    assert payload["version"] is None
    assert payload["digest"] == hashlib.sha256(b"0123456789").hexdigest()
    assert payload["artifact"] == str(tmp_path / "file_VersionHash.log")


def test_resolver_names_the_algorithm_it_is_given(tmp_path: Path) -> None:
    digest = hashlib.md5(b"x").digest()
    context = DetectionContext(display_name="x", output_dir=tmp_path)

    result = resolve_version(digest, {}, context, algorithm=MD5)

    assert result.algorithm == "MD5"
    text = (tmp_path / "x_VersionHash.log").read_text(encoding="utf-8")
    assert "x's MD5 checksum hash: new byte[16]" in text


def test_resolver_rejects_unknown_algorithm_names() -> None:
    digest = hashlib.sha256(b"x").digest()
    context = DetectionContext(display_name="x")

    with pytest.raises(UnknownAlgorithmError):
        VersionResolver(write_artifacts=False).resolve(
            digest, {digest: "1.0"}, context, algorithm="crc32"
        )
