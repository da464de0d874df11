import csv
import io
import json

from pdbmeta.export.csv_export import export_csv, format_value
from pdbmeta.export.json_export import export_json
from pdbmeta.pdb.reader import parse_stream


def test_format_value():
    assert format_value(["a", "b"]) == "a, b"
    assert format_value(b"\x01\x02") == "(Binary data 2 bytes) 0102"
    assert format_value(6) == "6"


def test_export_json(sample_mobi):
    result = parse_stream(sample_mobi)
    data = json.loads(export_json([("book.mobi", result)]))
    assert len(data) == 1
    entry = data[0]
    assert entry["source"] == "book.mobi"
    assert entry["file_type"] == "MOBI"
    assert entry["fields"]["MOBI:Author"] == "Jane Doe"
    assert entry["fields"]["MOBI:Subject"] == ["Fiction", "Mystery"]
    assert entry["fields"]["Palm:DatabaseName"] == "Test_Book"
    assert "warnings" not in entry


def test_export_json_binary(sample_mobi):
    result = parse_stream(sample_mobi, print_conv=False)
    entry = json.loads(export_json([("b", result)]))[0]
    assert entry["fields"]["Palm:PalmFileType"] == b"BOOKMOBI".hex()


def test_export_csv(sample_mobi):
    result = parse_stream(sample_mobi)
    rows = list(csv.reader(io.StringIO(export_csv([("book.mobi", result)]))))
    assert rows[0] == ["source", "file_type", "group", "tag_id", "name", "value"]
    by_name = {row[4]: row for row in rows[1:]}
    assert by_name["Author"] == ["book.mobi", "MOBI", "MOBI", "100", "Author", "Jane Doe"]
    assert by_name["Subject"][5] == "Fiction, Mystery"
    assert by_name["CodePage"][3] == "7"
