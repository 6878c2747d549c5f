"""Exceptions raised by the archive catalog."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog and archive access failures."""


class IdentifierError(CatalogError):
    """An external identifier is not well-formed."""


class ArchiveNotFoundError(CatalogError):
    """An identifier does not name an indexed archive."""


class EntryNotFoundError(CatalogError):
    """An entry index is outside the archive's range."""


class ArchiveReadError(CatalogError):
    """An archive or entry could not be opened or read."""


class CatalogBuildError(CatalogError):
    """The catalog could not be built from the data directory."""
