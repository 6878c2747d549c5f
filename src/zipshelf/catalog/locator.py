"""Random access to single archive entries.

Every call opens the archive afresh, so concurrent readers never share a
file handle or a read cursor.
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from os import PathLike
from typing import BinaryIO, Iterator

from zipshelf.catalog.errors import ArchiveReadError, EntryNotFoundError

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

_READ_ERRORS = (
    OSError,
    EOFError,
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    # Member names flagged as UTF-8 that do not decode.
    UnicodeDecodeError,
    # Encrypted members and unsupported compression methods.
    RuntimeError,
    NotImplementedError,
)


class EntryStream:
    """Readable stream over one archive entry.

    Owns both the archive and the entry handle; :meth:`close` releases both.
    """

    def __init__(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo, handle: BinaryIO) -> None:
        self._archive = archive
        self._info = info
        self._handle = handle
        self._closed = False

    @property
    def name(self) -> str:
        return self._info.filename

    @property
    def size(self) -> int:
        """Uncompressed size recorded in the central directory."""
        return self._info.file_size

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        try:
            return self._handle.read(size)
        except _READ_ERRORS as exc:
            raise ArchiveReadError(f"Failed reading {self.name!r}: {exc}") from exc

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the entry in chunks and close the stream afterwards.

        The stream is closed on exhaustion, on a read error and when the
        consumer closes the generator early.
        """
        try:
            while True:
                chunk = self.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._handle.close()
        finally:
            self._archive.close()

    def __enter__(self) -> EntryStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_entry(archive_path: str | PathLike[str], index: int) -> EntryStream:
    """Open entry ``index`` of the archive at ``archive_path``.

    Raises ``EntryNotFoundError`` when ``index`` is outside
    ``[0, number of entries)`` and ``ArchiveReadError`` for any I/O or
    archive format failure. No handle is left open when an error is raised.
    """
    try:
        archive = zipfile.ZipFile(archive_path)
    except _READ_ERRORS as exc:
        raise ArchiveReadError(f"Cannot open archive {archive_path}: {exc}") from exc

    try:
        members = archive.infolist()
        if not 0 <= index < len(members):
            raise EntryNotFoundError(
                f"Entry {index} out of range for {archive_path} ({len(members)} entries)"
            )
        info = members[index]
        handle = archive.open(info)
    except EntryNotFoundError:
        archive.close()
        raise
    except _READ_ERRORS as exc:
        archive.close()
        raise ArchiveReadError(f"Cannot open entry {index} of {archive_path}: {exc}") from exc

    LOGGER.debug("Opened %s[%d] (%s)", archive_path, index, info.filename)
    return EntryStream(archive, info, handle)


def copy_entry(
    archive_path: str | PathLike[str],
    index: int,
    sink: BinaryIO,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Copy one entry into ``sink`` and return the number of bytes written."""
    written = 0
    with open_entry(archive_path, index) as stream:
        for chunk in stream.iter_chunks(chunk_size):
            try:
                sink.write(chunk)
            except OSError as exc:
                raise ArchiveReadError(f"Copy of {stream.name!r} failed: {exc}") from exc
            written += len(chunk)
    return written
