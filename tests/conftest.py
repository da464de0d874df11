"""Builders for synthetic Palm database and MOBI files."""
from __future__ import annotations

import io
import struct

import pytest

from pdbmeta.pdb.constants import EPOCH_DELTA, MOBI_PREFIX_SIZE

RECORD0 = 88    # 78-byte header + one 8-byte record entry + 2 bytes padding


def build_header(signature: bytes = b"BOOKMOBI", name: bytes = b"Test_Book",
                 num_records: int = 1, record0: int = RECORD0,
                 created: int = EPOCH_DELTA + 86400, modified: int = 0,
                 backup: int = 0, mod_number: int = 7) -> bytes:
    buf = bytearray(86)
    buf[0:len(name)] = name
    struct.pack_into(">IIII", buf, 36, created, modified, backup, mod_number)
    buf[60:68] = signature
    struct.pack_into(">HI", buf, 76, num_records, record0)
    return bytes(buf)


def build_exth(entries: list[tuple[int, bytes]], size: int | None = None,
               count: int | None = None, magic: bytes = b"EXTH") -> bytes:
    body = b"".join(struct.pack(">II", tag, len(payload) + 8) + payload
                    for tag, payload in entries)
    if size is None:
        size = 12 + len(body)
    if count is None:
        count = len(entries)
    block = magic + struct.pack(">II", size, count) + body
    return block + b"\x00" * (-len(block) % 4)


def build_record0(book_name: bytes = b"A Test Book", code_page: int = 65001,
                  flags: int = 0x40, exth: bytes = b"", header_length: int = 232,
                  text_length: int = 12345, mobi_type: int = 2,
                  compression: int = 2, encryption: int = 0,
                  name_offset: int | None = None) -> bytes:
    head_size = 16 + header_length
    head = bytearray(head_size)
    struct.pack_into(">HHIHHHH", head, 0, compression, 0, text_length, 1, 4096, encryption, 0)
    head[16:20] = b"MOBI"
    struct.pack_into(">IIIII", head, 20, header_length, mobi_type, code_page, 0xDEADBEEF, 6)
    if name_offset is None:
        name_offset = head_size + len(exth)
    struct.pack_into(">II", head, 84, name_offset, len(book_name))
    struct.pack_into(">I", head, 104, 6)
    struct.pack_into(">I", head, 128, flags)
    record = bytes(head) + exth + book_name + b"\x00\x00"
    return record + b"\x00" * max(0, MOBI_PREFIX_SIZE - len(record))


def build_mobi(record: bytes | None = None, **header_args) -> bytes:
    if record is None:
        record = build_record0()
    header = build_header(**header_args)
    gap = header_args.get("record0", RECORD0) - len(header)
    return header + b"\x00" * gap + record


@pytest.fixture
def make_header():
    return build_header


@pytest.fixture
def make_exth():
    return build_exth


@pytest.fixture
def make_record0():
    return build_record0


@pytest.fixture
def make_mobi():
    return build_mobi


@pytest.fixture
def sample_exth():
    return build_exth([
        (100, b"Jane Doe"),
        (101, b"Example Press"),
        (105, b"Fiction"),
        (105, b"Mystery"),
        (106, b"2010-05-01T00:00:00+00:00"),
        (204, struct.pack(">I", 201)),
        (524, b"en"),
    ])


@pytest.fixture
def sample_mobi(sample_exth):
    return io.BytesIO(build_mobi(build_record0(exth=sample_exth)))
