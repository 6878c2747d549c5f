"""Shared fixtures for zipshelf tests."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, Sequence, Tuple

import pytest

Member = Tuple[str, bytes]

PAGES: list[Member] = [
    ("p0.jpg", b"\xff\xd8page-zero"),
    ("p1.jpg", b"\xff\xd8page-one"),
    ("p2.jpg", b"\xff\xd8page-two"),
]


def write_zip(path: Path, members: Sequence[Member], *, compression: int = zipfile.ZIP_DEFLATED) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=compression) as archive:
        for name, data in members:
            archive.writestr(name, data)
    return path


@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a zip archive below ``tmp_path``."""

    def factory(relative: str, members: Sequence[Member] = PAGES, **kwargs: int) -> Path:
        return write_zip(tmp_path / relative, members, **kwargs)

    return factory


@pytest.fixture
def volume(make_zip: Callable[..., Path]) -> Path:
    """``data/vol1.zip`` holding three JPEG pages."""
    return make_zip("data/vol1.zip")


def write_bad_utf8_zip(path: Path) -> Path:
    """Write a zip whose member name is flagged UTF-8 but is not valid UTF-8."""
    write_zip(path, [("Ébad.jpg", b"\xff\xd8")])
    raw = path.read_bytes()
    # "É" is stored as C3 89 with the UTF-8 flag set; 0xFF cannot start a sequence.
    path.write_bytes(raw.replace("Ébad".encode("utf-8"), b"\xff\x89bad"))
    return path
