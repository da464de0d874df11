"""Export parse results as JSON."""
from __future__ import annotations

import json
from typing import Any

from pdbmeta.pdb.records import ParseResult


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def result_entry(source: str, result: ParseResult) -> dict:
    """One JSON object for one file."""
    values = result.values
    entry = {
        "source": source,
        "file_type": result.file_type,
        "palm_type": result.palm_type,
        "fields": {
            f"{values.groups.get(name, 'Palm')}:{name}": _jsonable(value)
            for name, value in values.items()
        },
    }
    if result.warnings:
        entry["warnings"] = list(result.warnings)
    return entry


def export_json(results: list[tuple[str, ParseResult]]) -> str:
    """Export results as JSON string."""
    return json.dumps([result_entry(source, r) for source, r in results],
                      indent=2, ensure_ascii=False)
