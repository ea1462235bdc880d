"""Catalog errors."""


class CatalogError(Exception):
    """Raised when catalog data cannot be read, validated, or updated."""
