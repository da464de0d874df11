"""EXTH (MOBI extended header) parsing.

Layout, big-endian:
  prefix:  'EXTH'(4) + block size(4, includes the prefix) + entry count(4)
  entries: id(4) + size(4, includes these 8 bytes) + payload(size - 8)

The entry count is informational only; iteration is driven by the block
size, and stops quietly at the first entry that does not fit.
"""
from __future__ import annotations

import logging
import struct
from typing import BinaryIO, Iterator

from pdbmeta.pdb.charset import decode_text
from pdbmeta.pdb.constants import EXTH_ENTRY_HEADER_SIZE, EXTH_MAGIC, EXTH_PREFIX_SIZE
from pdbmeta.pdb.decoders import convert_value, cstring, decode_field
from pdbmeta.pdb.errors import FieldOutOfBounds, ShortRead
from pdbmeta.pdb.fields import FieldSpec, HeaderTable
from pdbmeta.pdb.records import ExtractedValues, ParseContext, RawBuffer
from pdbmeta.pdb.stream import read_exact
from pdbmeta.pdb.tables import EXTH

log = logging.getLogger(__name__)

_PREFIX = struct.Struct(">4sII")    # magic + size + count
_ENTRY = struct.Struct(">II")       # id + size


def iter_entries(body: RawBuffer) -> Iterator[tuple[int, RawBuffer]]:
    """Yield (tag id, payload) for each complete entry in an EXTH body."""
    pos = 0
    end = len(body)
    while pos + EXTH_ENTRY_HEADER_SIZE <= end:
        tag_id, size = _ENTRY.unpack_from(body.data, pos)
        if size < EXTH_ENTRY_HEADER_SIZE or pos + size > end:
            log.debug("EXTH entry %d at %d claims %d bytes, stopping", tag_id, pos, size)
            break
        start = pos + EXTH_ENTRY_HEADER_SIZE
        yield tag_id, RawBuffer(body.data[start:pos + size], body.position + start)
        pos += size


def decode_entry(tag_id: int, payload: RawBuffer, ctx: ParseContext,
                 values: ExtractedValues, table: HeaderTable = EXTH) -> bool:
    """Decode one entry into values. Returns False for unknown tags."""
    spec = table.get(tag_id)
    if spec is None:
        if not ctx.unknown:
            return False
        spec = FieldSpec(f"EXTH_{tag_id}")

    try:
        decode_field(spec, table, payload, 0, ctx, values, tag_id=tag_id,
                     length=len(payload))
    except FieldOutOfBounds:
        # payload too short for its numeric format
        values.store(spec.name, payload.data, is_list=spec.is_list,
                     group=table.group, tag_id=tag_id)
        return True

    if spec.resolve_format(table).is_text:
        # first pass assumed the default encoding
        text = decode_text(cstring(payload.data), ctx.encoding)
        values.replace_last(spec.name, convert_value(spec, text, ctx))
    return True


def decode_entries(body: RawBuffer, ctx: ParseContext, values: ExtractedValues,
                   table: HeaderTable = EXTH) -> int:
    """Decode all entries of an EXTH body. Returns the number stored."""
    count = 0
    for tag_id, payload in iter_entries(body):
        if decode_entry(tag_id, payload, ctx, values, table):
            count += 1
    return count


def parse_exth(stream: BinaryIO, offset: int, ctx: ParseContext,
               values: ExtractedValues) -> int:
    """Read and decode the EXTH block at a stream offset."""
    try:
        prefix = read_exact(stream, offset, EXTH_PREFIX_SIZE)
    except ShortRead:
        ctx.warn("Invalid MOBI extended header")
        return 0
    magic, size, num_entries = _PREFIX.unpack(prefix)
    if magic != EXTH_MAGIC or size <= EXTH_PREFIX_SIZE:
        ctx.warn("Invalid MOBI extended header")
        return 0

    try:
        data = read_exact(stream, offset + EXTH_PREFIX_SIZE, size - EXTH_PREFIX_SIZE)
    except ShortRead:
        ctx.warn("Truncated MOBI extended header")
        return 0

    log.debug("EXTH at %d: %d bytes, %d entries declared", offset, size, num_entries)
    return decode_entries(RawBuffer(data, offset + EXTH_PREFIX_SIZE), ctx, values, EXTH)
