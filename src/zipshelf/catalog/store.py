"""Read-only catalog of indexed archives."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

from zipshelf.catalog.errors import ArchiveNotFoundError
from zipshelf.models import ArchiveEntry


class CatalogStore:
    """Mapping from external identifier to archive metadata.

    Built once before serving and never mutated, so concurrent readers need
    no locking.
    """

    def __init__(self, entries: Mapping[str, ArchiveEntry] | Iterable[Tuple[str, ArchiveEntry]]) -> None:
        self._entries: Mapping[str, ArchiveEntry] = MappingProxyType(dict(entries))

    @classmethod
    def empty(cls) -> CatalogStore:
        return cls({})

    @property
    def entries(self) -> Mapping[str, ArchiveEntry]:
        return self._entries

    def lookup(self, identifier: str) -> ArchiveEntry:
        try:
            return self._entries[identifier]
        except KeyError:
            raise ArchiveNotFoundError(f"Unknown archive: {identifier!r}") from None

    def all(self) -> List[Tuple[str, ArchiveEntry]]:
        """Return ``(identifier, entry)`` pairs in indexing order."""
        return list(self._entries.items())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)
