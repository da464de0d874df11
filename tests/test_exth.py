import io
import struct

from pdbmeta.pdb.exth import decode_entries, iter_entries, parse_exth
from pdbmeta.pdb.records import ExtractedValues, ParseContext, RawBuffer


def _entry(tag: int, payload: bytes, size: int | None = None) -> bytes:
    return struct.pack(">II", tag, len(payload) + 8 if size is None else size) + payload


def _decode(body: bytes, ctx: ParseContext | None = None):
    ctx = ctx or ParseContext()
    values = ExtractedValues()
    count = decode_entries(RawBuffer(body, 0), ctx, values)
    return count, values, ctx


def test_trailing_bytes_ignored():
    body = _entry(100, b"Jane Doe\x00") + b"\x01\x02\x03"
    count, values, ctx = _decode(body)
    assert count == 1
    assert values.as_dict() == {"Author": "Jane Doe"}
    assert ctx.warnings == []


def test_entry_past_end_stops_iteration():
    body = _entry(100, b"Jane Doe") + _entry(101, b"Publisher", size=64) + _entry(104, b"123")
    count, values, ctx = _decode(body)
    assert count == 1
    assert values.as_dict() == {"Author": "Jane Doe"}
    assert ctx.warnings == []


def test_entry_shorter_than_header_stops_iteration():
    body = _entry(100, b"Jane Doe") + struct.pack(">II", 101, 4) + _entry(104, b"123")
    count, values, _ = _decode(body)
    assert count == 1
    assert "ISBN" not in values


def test_payload_positions_are_stream_relative():
    body = _entry(100, b"abc") + _entry(101, b"de")
    entries = list(iter_entries(RawBuffer(body, 1000)))
    assert [(tag, p.position, p.data) for tag, p in entries] == [
        (100, 1008, b"abc"),
        (101, 1019, b"de"),
    ]


def test_list_field_appends():
    body = _entry(105, b"Fiction") + _entry(100, b"Jane") + _entry(105, b"Mystery")
    _, values, _ = _decode(body)
    assert values["Subject"] == ["Fiction", "Mystery"]


def test_single_list_value_is_still_a_list():
    _, values, _ = _decode(_entry(105, b"Fiction"))
    assert values["Subject"] == ["Fiction"]


def test_numeric_entries():
    body = (_entry(204, struct.pack(">I", 201)) + _entry(116, struct.pack(">I", 1234))
            + _entry(404, b"\x01"))
    _, values, _ = _decode(body)
    assert values["CreatorSoftware"] == "Kindlegen (Linux)"
    assert values["StartReading"] == 1234
    assert values["TextToSpeech"] == "Disabled"

    _, raw, _ = _decode(body, ParseContext(print_conv=False))
    assert raw["CreatorSoftware"] == 201
    assert raw["TextToSpeech"] == 1


def test_short_numeric_payload_keeps_bytes():
    body = _entry(116, b"\x01\x02") + _entry(100, b"Jane")
    count, values, ctx = _decode(body)
    assert count == 2
    assert values["StartReading"] == b"\x01\x02"
    assert values["Author"] == "Jane"
    assert ctx.warnings == []


def test_numeric_entry_with_several_values():
    body = (_entry(116, struct.pack(">II", 1, 2)) + _entry(204, struct.pack(">II", 201, 1) + b"\x00")
            + _entry(404, b"\x00\x01"))
    _, values, _ = _decode(body)
    assert values["StartReading"] == "1 2"
    assert values["CreatorSoftware"] == "201 1"
    assert values["TextToSpeech"] == "0 1"


def test_text_redecoded_with_resolved_encoding():
    body = _entry(100, b"Caf\xe9 Author") + _entry(103, "Résumé".encode("cp1252"))
    _, values, _ = _decode(body, ParseContext(encoding="cp1252"))
    assert values["Author"] == "Café Author"
    assert values["Description"] == "Résumé"


def test_list_entry_redecoded():
    body = _entry(105, b"A") + _entry(105, b"Caf\xe9")
    _, values, _ = _decode(body, ParseContext(encoding="cp1252"))
    assert values["Subject"] == ["A", "Café"]


def test_publish_date_converted():
    _, values, _ = _decode(_entry(106, b"2010-05-01T00:00:00+00:00"))
    assert values["PublishDate"] == "2010:05:01 00:00:00+00:00"


def test_unknown_tags():
    body = _entry(9999, b"mystery") + _entry(100, b"Jane")
    count, values, _ = _decode(body)
    assert count == 1
    assert list(values) == ["Author"]

    count, values, _ = _decode(body, ParseContext(unknown=True))
    assert count == 2
    assert values["EXTH_9999"] == "mystery"
    assert values.tag_ids["EXTH_9999"] == 9999


def test_parse_exth(make_exth):
    block = make_exth([(100, b"Jane Doe"), (524, b"en")])
    stream = io.BytesIO(b"\xff" * 40 + block)
    ctx = ParseContext()
    values = ExtractedValues()
    assert parse_exth(stream, 40, ctx, values) == 2
    assert values.as_dict() == {"Author": "Jane Doe", "Language": "en"}
    assert ctx.warnings == []


def test_parse_exth_bad_magic(make_exth):
    stream = io.BytesIO(make_exth([(100, b"Jane")], magic=b"HTXE"))
    ctx = ParseContext()
    values = ExtractedValues()
    assert parse_exth(stream, 0, ctx, values) == 0
    assert ctx.warnings == ["Invalid MOBI extended header"]
    assert len(values) == 0


def test_parse_exth_size_must_exceed_prefix(make_exth):
    for size in (0, 12):
        stream = io.BytesIO(make_exth([(100, b"Jane")], size=size))
        ctx = ParseContext()
        assert parse_exth(stream, 0, ctx, ExtractedValues()) == 0
        assert ctx.warnings == ["Invalid MOBI extended header"]


def test_parse_exth_truncated_body(make_exth):
    block = make_exth([(100, b"Jane")], size=500)
    ctx = ParseContext()
    assert parse_exth(io.BytesIO(block), 0, ctx, ExtractedValues()) == 0
    assert ctx.warnings == ["Truncated MOBI extended header"]


def test_parse_exth_prefix_past_end():
    ctx = ParseContext()
    assert parse_exth(io.BytesIO(b"EXTH"), 0, ctx, ExtractedValues()) == 0
    assert ctx.warnings == ["Invalid MOBI extended header"]


def test_entry_count_is_not_used_for_iteration(make_exth):
    block = make_exth([(100, b"Jane"), (101, b"Press")], count=1)
    values = ExtractedValues()
    assert parse_exth(io.BytesIO(block), 0, ParseContext(), values) == 2
