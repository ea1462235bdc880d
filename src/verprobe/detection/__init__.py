"""Version detection: match file checksums against known versions."""

from .detector import detect_sha256_version, detect_version
from .models import DEFAULT_AUTHOR, DetectionContext, DetectionResult, label_name
from .rendering import (
    artifact_filename,
    byte_array_declaration,
    current_utc_string,
    format_artifact_line,
    parse_byte_array_declaration,
    parse_digest_text,
)
from .resolver import VersionResolver, resolve_version

__all__ = [
    "DEFAULT_AUTHOR",
    "DetectionContext",
    "DetectionResult",
    "VersionResolver",
    "artifact_filename",
    "byte_array_declaration",
    "current_utc_string",
    "detect_sha256_version",
    "detect_version",
    "format_artifact_line",
    "label_name",
    "parse_byte_array_declaration",
    "parse_digest_text",
    "resolve_version",
]
