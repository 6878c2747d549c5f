"""Tests for single-entry access."""

from __future__ import annotations

import io
import zipfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

import pytest

from conftest import PAGES, write_bad_utf8_zip
from zipshelf.catalog.errors import ArchiveReadError, EntryNotFoundError
from zipshelf.catalog.locator import EntryStream, copy_entry, open_entry


class TestOpenEntry:
    """Test open_entry."""

    @pytest.mark.parametrize("index", range(len(PAGES)))
    def test_every_valid_index(self, volume: Path, index: int) -> None:
        """Should return the bytes of the entry at each index."""
        name, data = PAGES[index]
        with open_entry(volume, index) as stream:
            assert stream.name == name
            assert stream.size == len(data)
            assert stream.read() == data

    @pytest.mark.parametrize("index", [-1, -100, len(PAGES), 5])
    def test_out_of_range(self, volume: Path, index: int) -> None:
        """Should raise EntryNotFoundError outside [0, n)."""
        with pytest.raises(EntryNotFoundError):
            open_entry(volume, index)

    def test_empty_archive(self, make_zip: Callable[..., Path]) -> None:
        """Should treat every index as missing for an empty archive."""
        empty = make_zip("empty.zip", [])
        with pytest.raises(EntryNotFoundError):
            open_entry(empty, 0)

    def test_stored_entries(self, make_zip: Callable[..., Path]) -> None:
        """Should read uncompressed members."""
        stored = make_zip("stored.zip", compression=zipfile.ZIP_STORED)
        with open_entry(stored, 2) as stream:
            assert stream.read() == PAGES[2][1]

    def test_missing_archive(self, tmp_path: Path) -> None:
        """Should raise ArchiveReadError when the file does not exist."""
        with pytest.raises(ArchiveReadError):
            open_entry(tmp_path / "missing.zip", 0)

    def test_not_a_zip(self, tmp_path: Path) -> None:
        """Should raise ArchiveReadError for a corrupt archive."""
        bogus = tmp_path / "bogus.zip"
        bogus.write_bytes(b"definitely not a zip file")
        with pytest.raises(ArchiveReadError):
            open_entry(bogus, 0)

    def test_undecodable_member_name(self, tmp_path: Path) -> None:
        """Should raise ArchiveReadError when a UTF-8 flagged name does not decode."""
        bad = write_bad_utf8_zip(tmp_path / "bad.zip")
        with pytest.raises(ArchiveReadError):
            open_entry(bad, 0)

    def test_crc_mismatch_surfaces_as_read_error(self, make_zip: Callable[..., Path]) -> None:
        """Should raise ArchiveReadError when entry data is damaged."""
        path = make_zip("damaged.zip", compression=zipfile.ZIP_STORED)
        raw = path.read_bytes()
        path.write_bytes(raw.replace(b"page-one", b"PAGE-ONE"))

        with open_entry(path, 1) as stream:
            with pytest.raises(ArchiveReadError):
                stream.read()

    def test_concurrent_reads_same_archive(self, volume: Path) -> None:
        """Should serve different entries of one archive in parallel."""

        def read(index: int) -> bytes:
            with open_entry(volume, index) as stream:
                return b"".join(stream.iter_chunks(4))

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(read, [0, 2, 1, 0, 2, 1]))

        expected = [PAGES[i][1] for i in [0, 2, 1, 0, 2, 1]]
        assert results == expected


class TestEntryStream:
    """Test EntryStream resource handling."""

    def test_iter_chunks_closes_when_exhausted(self, volume: Path) -> None:
        """Should close the stream after the last chunk."""
        stream = open_entry(volume, 0)
        data = b"".join(stream.iter_chunks(3))
        assert data == PAGES[0][1]
        assert stream.closed

    def test_iter_chunks_closes_when_abandoned(self, volume: Path) -> None:
        """Should close the stream when the consumer stops early."""
        stream = open_entry(volume, 0)
        chunks = stream.iter_chunks(2)
        assert next(chunks) == PAGES[0][1][:2]
        assert not stream.closed
        chunks.close()
        assert stream.closed

    def test_close_is_idempotent(self, volume: Path) -> None:
        """Should allow closing more than once."""
        stream = open_entry(volume, 1)
        stream.close()
        stream.close()
        assert stream.closed

    def test_context_manager(self, volume: Path) -> None:
        """Should close on leaving the with block."""
        with open_entry(volume, 1) as stream:
            assert isinstance(stream, EntryStream)
        assert stream.closed


class TestCopyEntry:
    """Test copy_entry."""

    def test_copy_to_sink(self, volume: Path) -> None:
        """Should write the entry and return its length."""
        sink = io.BytesIO()
        written = copy_entry(volume, 2, sink, chunk_size=5)
        assert sink.getvalue() == PAGES[2][1]
        assert written == len(PAGES[2][1])

    def test_copy_out_of_range(self, volume: Path) -> None:
        """Should raise EntryNotFoundError without writing."""
        sink = io.BytesIO()
        with pytest.raises(EntryNotFoundError):
            copy_entry(volume, 3, sink)
        assert sink.getvalue() == b""

    def test_copy_failing_sink(self, volume: Path) -> None:
        """Should surface sink failures as ArchiveReadError."""

        class BrokenSink(io.RawIOBase):
            def write(self, data: bytes) -> int:
                raise BrokenPipeError("client went away")

        with pytest.raises(ArchiveReadError):
            copy_entry(volume, 0, BrokenSink())
