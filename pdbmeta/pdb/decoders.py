"""Table-driven field decoding.

A HeaderTable describes where each field lives and how to convert it. The
decoder reads each field from a RawBuffer, runs it through the field's
conversions and stores the result in an ExtractedValues mapping:

  raw bytes -> raw_conv -> (publish to context) -> value_conv -> print_conv

A field that does not fit in the buffer is skipped without complaint. A
conversion that fails leaves the value as it was before that step.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from pdbmeta.pdb.charset import decode_text
from pdbmeta.pdb.errors import FieldOutOfBounds
from pdbmeta.pdb.fields import FieldFormat, FieldSpec, HeaderTable
from pdbmeta.pdb.records import ExtractedValues, ParseContext, RawBuffer

log = logging.getLogger(__name__)


def cstring(data: bytes) -> bytes:
    """Bytes up to (not including) the first NUL."""
    end = data.find(b"\x00")
    return data if end == -1 else data[:end]


def _read_string(buf: RawBuffer, offset: int, size: int) -> str:
    return decode_text(cstring(buf.span(offset, size)))


_READERS: dict[FieldFormat, Callable[[RawBuffer, int, int], Any]] = {
    FieldFormat.UINT8: lambda buf, offset, size: buf.uint8(offset),
    FieldFormat.UINT16: lambda buf, offset, size: buf.uint16(offset),
    FieldFormat.UINT32: lambda buf, offset, size: buf.uint32(offset),
    FieldFormat.UNDEF: lambda buf, offset, size: buf.span(offset, size),
    FieldFormat.STRING: _read_string,
    FieldFormat.TEXT: _read_string,
}


def read_raw(spec: FieldSpec, table: HeaderTable, buf: RawBuffer, offset: int,
             length: Optional[int] = None) -> Any:
    """Read the unconverted value of a field. Raises FieldOutOfBounds.

    length is the number of bytes the container gives the field. A numeric
    field with room for several values reads all of them, joined by spaces.
    """
    fmt = spec.resolve_format(table)
    reader = _READERS[fmt]
    size = spec.size(table)
    if size is None:
        size = len(buf) - offset
    elif length is not None and fmt.fixed_size and length >= 2 * size:
        return " ".join(str(reader(buf, offset + i * size, size))
                        for i in range(length // size))
    return reader(buf, offset, size)


def _soft(conv: Callable[[Any], Any], value: Any, name: str) -> Any:
    try:
        return conv(value)
    except (ValueError, TypeError, ArithmeticError) as e:
        log.debug("conversion of %s failed (%s), keeping %r", name, e, value)
        return value


def convert_value(spec: FieldSpec, raw: Any, ctx: ParseContext) -> Any:
    """Apply a field's conversions to a raw value."""
    value = raw
    if spec.raw_conv is not None:
        value = _soft(spec.raw_conv, value, spec.name)
    if spec.publish:
        ctx.publish(spec.publish, value)
    if spec.value_conv is not None:
        value = _soft(spec.value_conv, value, spec.name)
    if ctx.print_conv and spec.print_conv is not None:
        if isinstance(spec.print_conv, dict):
            try:
                value = spec.print_conv.get(value, value)
            except TypeError:   # unhashable
                pass
        else:
            value = _soft(spec.print_conv, value, spec.name)
    return value


def decode_field(spec: FieldSpec, table: HeaderTable, buf: RawBuffer, offset: int,
                 ctx: ParseContext, values: ExtractedValues,
                 tag_id: Optional[int] = None, length: Optional[int] = None) -> Any:
    """Decode one field and store it. Raises FieldOutOfBounds."""
    raw = read_raw(spec, table, buf, offset, length)
    value = convert_value(spec, raw, ctx)
    values.store(spec.name, value, is_list=spec.is_list, group=table.group, tag_id=tag_id)
    return value


def decode_table(table: HeaderTable, buf: RawBuffer, ctx: ParseContext,
                 values: Optional[ExtractedValues] = None) -> ExtractedValues:
    """Decode every field of a positional table from buf."""
    if table.tagged:
        raise ValueError(f"{table.name} is a tagged table")
    if values is None:
        values = ExtractedValues()

    for position, spec in table.fields.items():
        offset = table.offset_of(position)
        try:
            decode_field(spec, table, buf, offset, ctx, values, tag_id=position)
        except FieldOutOfBounds:
            log.debug("%s: %s at byte %d is outside the %d byte buffer",
                      table.name, spec.name, offset, len(buf))
    return values
