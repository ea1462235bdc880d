"""Text rendering for version hash artifacts.

The byte-array literal written to an artifact exists so that an operator can
paste it straight into a source-level catalog of known versions. The parsers
in this module accept the same text back, along with plain hex strings.
"""

from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

UTC_SORTABLE_FORMAT = "%Y-%m-%d %H:%M:%SZ"
ARTIFACT_SUFFIX = "_VersionHash.log"
TARGET_ARTIFACT_SUFFIX = "_version.log"

_LITERAL_PATTERN = re.compile(
    r"new\s+byte\s*\[\s*(?P<size>\d+)\s*\]\s*\{(?P<body>[^}]*)\}\s*;?"
)
_BYTE_TOKEN_PATTERN = re.compile(r"0[xX][0-9A-Fa-f]{1,2}")
_HEX_SEPARATORS = re.compile(r"[\s:\-]")


def current_utc_string(fmt: str = UTC_SORTABLE_FORMAT, *, now: Optional[datetime] = None) -> str:
    """Return the current UTC time rendered with ``fmt``.

    The default format is the universal sortable layout ``2024-01-31 13:45:00Z``.
    """
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(fmt)


def display_name_for(file_path: Union[str, "os.PathLike[str]"]) -> str:
    """Return the file name of ``file_path`` without its final extension."""
    return Path(os.fsdecode(file_path)).stem


def byte_array_declaration(digest: bytes) -> str:
    """Render a digest as a byte-array literal.

    Example:
        >>> byte_array_declaration(bytes([0xAA, 0x01]))
        'new byte[2] { 0xAA, 0x01 };'
    """
    body = ", ".join(f"0x{value:02X}" for value in digest)
    return f"new byte[{len(digest)}] {{ {body} }};"


def field_declaration(target: str) -> str:
    """Return the field declaration prefix used for target-program artifacts."""
    return f"private static readonly byte[] {target.lower()}??_00000000 = "


def parse_byte_array_declaration(text: str) -> bytes:
    """Parse the first byte-array literal found in ``text``.

    Raises:
        ValueError: If no literal is present, a token is not a ``0x..`` byte,
            or the declared length disagrees with the number of entries.
    """
    match = _LITERAL_PATTERN.search(text)
    if match is None:
        raise ValueError("No byte array literal found.")

    values = []
    for token in match.group("body").split(","):
        token = token.strip()
        if not token:
            continue
        if not _BYTE_TOKEN_PATTERN.fullmatch(token):
            raise ValueError(f"Invalid byte value {token!r} in byte array literal.")
        values.append(int(token, 16))

    declared = int(match.group("size"))
    if declared != len(values):
        raise ValueError(
            f"Byte array literal declares {declared} bytes but contains {len(values)}."
        )
    return bytes(values)


def parse_digest_text(text: str) -> bytes:
    """Parse a digest written as hex or as a byte-array literal.

    Hex text may use either case and may separate byte pairs with spaces,
    colons, or dashes. Literal text may be a full artifact line.

    Raises:
        ValueError: If the text is neither valid hex nor a valid literal.
    """
    if "{" in text:
        return parse_byte_array_declaration(text)
    compact = _HEX_SEPARATORS.sub("", text)
    if compact[:2].lower() == "0x":
        compact = compact[2:]
    if not compact:
        raise ValueError("Digest text is empty.")
    try:
        return bytes.fromhex(compact)
    except ValueError as exc:
        raise ValueError(f"Digest text is not valid hex: {text!r}") from exc


def artifact_filename(display_name: str, target: Optional[str] = None) -> str:
    """Return the artifact file name for a detection.

    Args:
        display_name: Base name of the inspected file.
        target: Optional program name; selects the ``<target>_version.log`` variant.
    """
    if target:
        return f"{target.lower()}{TARGET_ARTIFACT_SUFFIX}"
    return f"{display_name}{ARTIFACT_SUFFIX}"


def format_artifact_line(
    display_name: str,
    algorithm_name: str,
    digest: bytes,
    *,
    target: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> str:
    """Return the single line written to a version hash artifact (no newline)."""
    literal = byte_array_declaration(digest)
    if target:
        literal = field_declaration(target) + literal
    stamp = timestamp if timestamp is not None else current_utc_string()
    return f"[{stamp}] {display_name}'s {algorithm_name} checksum hash: {literal}"


__all__ = [
    "ARTIFACT_SUFFIX",
    "TARGET_ARTIFACT_SUFFIX",
    "UTC_SORTABLE_FORMAT",
    "artifact_filename",
    "byte_array_declaration",
    "current_utc_string",
    "display_name_for",
    "field_declaration",
    "format_artifact_line",
    "parse_byte_array_declaration",
    "parse_digest_text",
]
