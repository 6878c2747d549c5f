"""Core zipshelf data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """Indexed metadata for one archive."""

    path: Path
    name: str
    entry_names: Tuple[str, ...]
    pages: Tuple[int, ...]

    @property
    def entry_count(self) -> int:
        """Number of viewable pages."""
        return len(self.pages)

    def page_name(self, index: int) -> str:
        return self.entry_names[index]
