"""Reversible mapping between archive paths and URL identifiers."""

from __future__ import annotations

import base64
import binascii
import re
from os import PathLike

from zipshelf.catalog.errors import IdentifierError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def encode_identifier(path: str | PathLike[str]) -> str:
    """Encode a path as unpadded URL-safe base64 of its UTF-8 bytes."""
    raw = str(path).encode("utf-8", "surrogatepass")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_identifier(identifier: str) -> str:
    """Recover the path encoded by :func:`encode_identifier`.

    Raises ``IdentifierError`` for anything that :func:`encode_identifier`
    could not have produced.
    """
    if not _ALPHABET.fullmatch(identifier):
        raise IdentifierError(f"Malformed identifier: {identifier!r}")
    if len(identifier) % 4 == 1:
        raise IdentifierError(f"Malformed identifier: {identifier!r}")

    padded = identifier + "=" * (-len(identifier) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        path = raw.decode("utf-8", "surrogatepass")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise IdentifierError(f"Malformed identifier: {identifier!r}") from exc

    # Unused trailing bits must be zero, otherwise two identifiers share a path.
    if encode_identifier(path) != identifier:
        raise IdentifierError(f"Non-canonical identifier: {identifier!r}")
    return path
