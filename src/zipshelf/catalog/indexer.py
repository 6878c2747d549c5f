"""Archive discovery and catalog construction."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

from zipshelf.catalog.codec import encode_identifier
from zipshelf.catalog.errors import CatalogBuildError
from zipshelf.catalog.store import CatalogStore
from zipshelf.models import ArchiveEntry
from zipshelf.utils.files import is_archive_path, is_image_name, iter_files

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexStats:
    indexed: int = 0
    skipped: int = 0
    failed: int = 0
    failed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "indexed":
            self.indexed += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
            self.failed_files.append(path)


def read_archive(path: Path) -> ArchiveEntry:
    """Read the central directory of one archive."""
    with zipfile.ZipFile(path) as archive:
        members = archive.infolist()
    entry_names = tuple(info.filename for info in members)
    pages = tuple(
        index
        for index, info in enumerate(members)
        if not info.is_dir() and is_image_name(info.filename)
    )
    return ArchiveEntry(path=path, name=path.name, entry_names=entry_names, pages=pages)


class Indexer:
    """Walks a data directory and builds the archive catalog."""

    def __init__(self, root: Path, *, strict: bool = False) -> None:
        self.root = Path(root)
        self.strict = strict

    def index(self) -> Tuple[CatalogStore, IndexStats]:
        """Index every archive under the root directory.

        Unreadable archives are logged and left out of the catalog, unless
        ``strict`` is set, in which case the first one aborts the walk.
        """
        if not self.root.exists():
            raise CatalogBuildError(f"Data directory not found: {self.root}")
        if not self.root.is_dir():
            raise CatalogBuildError(f"Data path is not a directory: {self.root}")

        stats = IndexStats()
        entries: Dict[str, ArchiveEntry] = {}

        for path in iter_files(self.root):
            if not is_archive_path(path):
                stats.increment("skipped", path)
                continue
            try:
                entry = read_archive(path)
            except (OSError, UnicodeDecodeError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
                if self.strict:
                    raise CatalogBuildError(f"Failed to index {path}: {exc}") from exc
                LOGGER.error("Failed to index %s: %s", path, exc)
                stats.increment("failed", path)
                continue

            entries[encode_identifier(path)] = entry
            stats.increment("indexed", path)
            LOGGER.debug("Indexed %s (%d pages)", path, entry.entry_count)

        if stats.failed and not stats.indexed:
            raise CatalogBuildError(
                f"None of the {stats.failed} archives under {self.root} could be read"
            )
        if not entries:
            LOGGER.warning("No archives found under %s", self.root)

        LOGGER.info(
            "Indexed %d archives from %s (%d failed, %d other files skipped)",
            stats.indexed,
            self.root,
            stats.failed,
            stats.skipped,
        )
        return CatalogStore(entries), stats


def build_catalog(root: Path, *, strict: bool = False) -> Tuple[CatalogStore, IndexStats]:
    """Build the catalog for ``root``; see :meth:`Indexer.index`."""
    return Indexer(root, strict=strict).index()
