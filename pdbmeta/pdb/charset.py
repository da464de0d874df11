"""Code page lookup and tolerant byte-to-text decoding."""
from __future__ import annotations

import codecs
from typing import Optional

from pdbmeta.pdb.constants import CODEPAGE_UTF8, DEFAULT_ENCODING

# Windows code pages whose Python codec name is not simply "cp<N>"
_CODEPAGE_NAMES: dict[int, str] = {
    CODEPAGE_UTF8: "utf-8",
    1200: "utf-16-le",
    1201: "utf-16-be",
    10000: "mac-roman",
    10006: "mac-greek",
    10007: "mac-cyrillic",
    10029: "mac-latin2",
    10079: "mac-iceland",
    10081: "mac-turkish",
    20127: "ascii",
    20866: "koi8-r",
    21866: "koi8-u",
    28591: "latin-1",
    28592: "iso8859-2",
    28595: "iso8859-5",
    28597: "iso8859-7",
    28599: "iso8859-9",
    28605: "iso8859-15",
    65000: "utf-7",
}


def map_charset(code_page: Optional[int]) -> Optional[str]:
    """Return the Python codec name for a Windows code page, or None."""
    if not code_page:
        return None
    name = _CODEPAGE_NAMES.get(code_page, f"cp{code_page}")
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


def decode_text(data: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    """Decode bytes, never failing: bad sequences become U+FFFD."""
    try:
        return data.decode(encoding, errors="replace")
    except LookupError:
        return data.decode(DEFAULT_ENCODING, errors="replace")
