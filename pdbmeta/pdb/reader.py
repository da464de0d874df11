"""Palm database metadata reader (PDB/PRC, MOBI, AZW/AZW3)."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from pdbmeta.pdb.constants import PDB_HEADER_SIZE
from pdbmeta.pdb.decoders import decode_table
from pdbmeta.pdb.errors import NotRecognized, ShortRead
from pdbmeta.pdb.exth import parse_exth
from pdbmeta.pdb.mobi import parse_mobi
from pdbmeta.pdb.records import ExtractedValues, ParseContext, ParseResult, RawBuffer
from pdbmeta.pdb.signatures import classify
from pdbmeta.pdb.stream import read_exact
from pdbmeta.pdb.tables import PDB_HEADER

log = logging.getLogger(__name__)


def parse_stream(stream: BinaryIO, *, print_conv: bool = True,
                 unknown: bool = False) -> ParseResult:
    """Extract metadata from a seekable binary stream.

    Raises NotRecognized if the stream is not a known Palm database. Any
    later problem is reported in ParseResult.warnings and decoding stops at
    that point, keeping everything read so far.
    """
    ctx = ParseContext(print_conv=print_conv, unknown=unknown)
    try:
        data = read_exact(stream, 0, PDB_HEADER_SIZE)
    except ShortRead as e:
        raise NotRecognized(str(e)) from e
    kind = classify(data)
    log.debug("recognized %s (%s)", kind.label, kind.file_type)

    header = RawBuffer(data, 0)
    values = decode_table(PDB_HEADER, header, ctx, ExtractedValues())

    if kind.is_mobi:
        exth_offset = parse_mobi(stream, header, ctx, values)
        if exth_offset is not None:
            parse_exth(stream, exth_offset, ctx, values)

    return ParseResult(
        file_type=kind.file_type,
        palm_type=kind.label,
        values=values,
        warnings=ctx.warnings,
    )


class PDBReader:
    """Reads metadata from a Palm database file on disk."""

    def __init__(self, path: Path, print_conv: bool = True, unknown: bool = False):
        self.path = Path(path)
        self.print_conv = print_conv
        self.unknown = unknown

    def parse(self) -> ParseResult:
        with open(self.path, "rb") as f:
            return parse_stream(f, print_conv=self.print_conv, unknown=self.unknown)


def main():
    """Quick test: dump the metadata of one file."""
    import sys
    if len(sys.argv) < 2:
        print("Usage: python -m pdbmeta.pdb.reader <path/to/book.mobi>")
        sys.exit(1)

    path = Path(sys.argv[1])
    try:
        result = PDBReader(path).parse()
    except NotRecognized as e:
        print(f"{path.name}: not a Palm database ({e})")
        sys.exit(1)

    print(f"{path.name}: {result.palm_type} ({result.file_type})\n")
    for name, value in result.values.items():
        print(f"  {name:<28} {value}")
    for warning in result.warnings:
        print(f"  Warning: {warning}")


if __name__ == "__main__":
    main()
