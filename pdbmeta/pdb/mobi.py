"""MOBI header parsing (record 0 of a Mobipocket/Kindle book).

Record 0 starts with a 16-byte PalmDOC header followed by the MOBI header.
The MOBI header holds the book name as an (offset, length) pair pointing
elsewhere in the record, and a flag telling whether an EXTH block follows.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from pdbmeta.pdb.charset import decode_text, map_charset
from pdbmeta.pdb.constants import (
    BOOK_NAME_LENGTH,
    BOOK_NAME_OFFSET,
    DEFAULT_ENCODING,
    ERROR_STRING,
    FLAG_HAS_EXTH,
    MOBI_FLAGS_OFFSET,
    MOBI_HEADER_LENGTH_OFFSET,
    MOBI_MAGIC,
    MOBI_MAGIC_OFFSET,
    MOBI_PREFIX_SIZE,
    PALMDOC_HEADER_SIZE,
    RECORD0_OFFSET,
    RECORD_COUNT_OFFSET,
)
from pdbmeta.pdb.decoders import decode_table
from pdbmeta.pdb.errors import ShortRead
from pdbmeta.pdb.records import ExtractedValues, ParseContext, RawBuffer
from pdbmeta.pdb.stream import read_exact
from pdbmeta.pdb.tables import BOOK_NAME_POSITION, MOBI_HEADER

log = logging.getLogger(__name__)


def locate_record0(header: RawBuffer) -> Optional[int]:
    """Stream offset of record 0, or None if the database has no records."""
    if header.uint16(RECORD_COUNT_OFFSET) == 0:
        return None
    return header.uint32(RECORD0_OFFSET)


def resolve_indirect_string(stream: BinaryIO, record: RawBuffer, ctx: ParseContext,
                            values: ExtractedValues, name: str,
                            offset_at: int, length_at: int, group: str,
                            tag_id: Optional[int] = None) -> str:
    """Replace a decoded offset with the string it points at.

    The string lives at record.position + offset. If it cannot be read the
    value becomes ERROR_STRING.
    """
    offset = record.uint32(offset_at)
    length = record.uint32(length_at)
    try:
        text = decode_text(read_exact(stream, record.position + offset, length), ctx.encoding)
    except ShortRead as e:
        log.debug("%s: %s", name, e)
        ctx.warn(f"Error reading {name} string")
        text = ERROR_STRING
    values.store(name, text, group=group, tag_id=tag_id)
    return text


def parse_mobi(stream: BinaryIO, header: RawBuffer, ctx: ParseContext,
               values: ExtractedValues) -> Optional[int]:
    """Decode the MOBI header.

    Returns the stream offset of the EXTH block, or None when there is
    nothing more to read.
    """
    record0 = locate_record0(header)
    if record0 is None:
        log.debug("no records, skipping MOBI header")
        return None

    try:
        prefix = RawBuffer(read_exact(stream, record0, MOBI_PREFIX_SIZE), record0)
    except ShortRead:
        ctx.warn("Truncated MOBI header")
        return None
    if prefix.span(MOBI_MAGIC_OFFSET, len(MOBI_MAGIC)) != MOBI_MAGIC:
        ctx.warn("Invalid MOBI header")
        return None

    decode_table(MOBI_HEADER, prefix, ctx, values)
    ctx.encoding = map_charset(ctx.code_page) or DEFAULT_ENCODING
    log.debug("MOBI header at %d, code page %s, text encoding %s",
              record0, ctx.code_page, ctx.encoding)

    resolve_indirect_string(stream, prefix, ctx, values, "BookName",
                            BOOK_NAME_OFFSET, BOOK_NAME_LENGTH, MOBI_HEADER.group,
                            tag_id=BOOK_NAME_POSITION)

    if not prefix.uint32(MOBI_FLAGS_OFFSET) & FLAG_HAS_EXTH:
        return None
    # header length does not include the PalmDOC header
    return record0 + prefix.uint32(MOBI_HEADER_LENGTH_OFFSET) + PALMDOC_HEADER_SIZE
