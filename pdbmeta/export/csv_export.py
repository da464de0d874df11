"""Export parse results as CSV."""
from __future__ import annotations

import csv
import io
from typing import Any

from pdbmeta.pdb.records import ParseResult


def format_value(value: Any) -> str:
    """Flatten a value for one-line display."""
    if isinstance(value, (bytes, bytearray)):
        return f"(Binary data {len(value)} bytes) {value.hex()}"
    if isinstance(value, list):
        return ", ".join(format_value(v) for v in value)
    return str(value)


def export_csv(results: list[tuple[str, ParseResult]]) -> str:
    """Export results as CSV string, one row per field."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["source", "file_type", "group", "tag_id", "name", "value"])

    for source, result in results:
        values = result.values
        for name, value in values.items():
            tag_id = values.tag_ids.get(name)
            writer.writerow([
                source,
                result.file_type,
                values.groups.get(name, ""),
                "" if tag_id is None else tag_id,
                name,
                format_value(value),
            ])
        for warning in result.warnings:
            writer.writerow([source, result.file_type, "", "", "Warning", warning])

    return output.getvalue()
