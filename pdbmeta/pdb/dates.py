"""Timestamp handling for Palm database headers and EXTH dates.

Palm databases store dates as seconds since 1904:01:01, but plenty of
software writes seconds since 1970:01:01 instead. Values large enough to be
1904-based are shifted to the Unix epoch; smaller values are assumed to be
Unix times already.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from pdbmeta.pdb.constants import EPOCH_DELTA, ZERO_DATE

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_XMP_DATE_RE = re.compile(
    r"^\s*(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(\.\d+)?)?)?"
    r"\s*(Z|[+-]\d{2}:?\d{2})?\s*$"
)


def normalize_epoch(raw: int) -> int:
    """Return seconds since 1970:01:01 for a raw header timestamp."""
    if raw >= EPOCH_DELTA:
        return raw - EPOCH_DELTA
    return raw


def render_calendar(seconds: int) -> str:
    """Render Unix seconds as an EXIF-style UTC date/time string.

    Zero means the date was never set and renders as all zeros.
    """
    if seconds == 0:
        return ZERO_DATE
    dt = _UNIX_EPOCH + timedelta(seconds=seconds)
    return dt.strftime("%Y:%m:%d %H:%M:%SZ")


def convert_xmp_date(text: str) -> str:
    """Convert an ISO 8601 date to 'YYYY:MM:DD HH:MM:SS[+HH:MM]'.

    Text that does not look like a date is returned unchanged.
    """
    m = _XMP_DATE_RE.match(text)
    if not m:
        return text
    year, month, day, hour, minute, second, frac, tz = m.groups()
    out = ":".join(p for p in (year, month, day) if p)
    if hour is not None:
        out += f" {hour}:{minute}:{second or '00'}{frac or ''}"
    if tz:
        if tz != "Z" and ":" not in tz:
            tz = f"{tz[:3]}:{tz[3:]}"
        out += tz
    return out
