"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterator

ARCHIVE_SUFFIXES = frozenset({".zip"})
IMAGE_SUFFIXES = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".avif", ".jxl", ".tif", ".tiff"}
)


def is_archive_path(path: Path) -> bool:
    return path.suffix.lower() in ARCHIVE_SUFFIXES


def is_image_name(name: str) -> bool:
    """Return True when an archive member name looks like a page image."""
    if not name or name.endswith("/"):
        return False
    member = PurePosixPath(name.replace("\\", "/"))
    if member.name.startswith("."):
        return False
    return member.suffix.lower() in IMAGE_SUFFIXES


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root`` in sorted order."""
    for item in sorted(root.rglob("*")):
        if item.is_file():
            yield item
