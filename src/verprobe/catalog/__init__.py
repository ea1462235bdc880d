"""Persistence helpers for version catalogs stored as YAML."""

from __future__ import annotations

import textwrap
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import CatalogError
from .models import VersionCatalog

_CATALOG_HEADER = textwrap.dedent(
    """\
    # verprobe version catalog
    # Digests may be hex strings or byte array literals copied from a *_VersionHash.log file.
    """
)


def load_catalog(path: Path) -> VersionCatalog:
    """Load a catalog from a YAML file.

    Args:
        path: Catalog file location.

    Returns:
        VersionCatalog: Validated catalog.

    Raises:
        CatalogError: If the file is missing, unparsable, or invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Unable to read catalog {path}: {exc}") from exc

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse catalog {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise CatalogError("Catalog file must contain a mapping at the top level.")

    try:
        return VersionCatalog.model_validate(raw)
    except ValidationError as exc:
        raise CatalogError(f"Invalid catalog {path}: {exc}") from exc


def save_catalog(path: Path, catalog: VersionCatalog) -> None:
    """Persist a catalog as YAML, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    serialized = yaml.safe_dump(catalog.model_dump(mode="python"), sort_keys=False)
    path.write_text(_CATALOG_HEADER + serialized, encoding="utf-8")


__all__ = ["CatalogError", "VersionCatalog", "load_catalog", "save_catalog"]
