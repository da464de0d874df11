"""Bounded reads from a seekable byte stream."""
from __future__ import annotations

import io
from typing import BinaryIO

from pdbmeta.pdb.errors import ShortRead


def stream_size(stream: BinaryIO) -> int:
    pos = stream.tell()
    try:
        return stream.seek(0, io.SEEK_END)
    finally:
        stream.seek(pos)


def read_exact(stream: BinaryIO, offset: int, length: int) -> bytes:
    """Read exactly length bytes at offset, or raise ShortRead.

    The size check comes first so a corrupt length never turns into a
    multi-gigabyte read request.
    """
    try:
        available = stream_size(stream) - offset
    except (OSError, ValueError) as e:
        raise ShortRead(offset, length, 0) from e
    if offset < 0 or available < length:
        raise ShortRead(offset, length, max(0, min(available, length)))

    stream.seek(offset)
    data = stream.read(length)
    if len(data) != length:
        raise ShortRead(offset, length, len(data))
    return data
