import pytest

from pdbmeta.pdb.constants import EPOCH_DELTA
from pdbmeta.pdb.dates import convert_xmp_date, normalize_epoch, render_calendar


def test_delta_value():
    assert EPOCH_DELTA == 2082844800


def test_normalize_at_delta():
    assert normalize_epoch(EPOCH_DELTA) == 0


def test_normalize_below_delta_unchanged():
    assert normalize_epoch(EPOCH_DELTA - 1) == EPOCH_DELTA - 1
    assert normalize_epoch(0) == 0


def test_normalize_palm_epoch():
    # 2014:05:28 00:00:00 UTC written relative to 1904
    assert normalize_epoch(1401235200 + EPOCH_DELTA) == 1401235200


def test_render_calendar():
    assert render_calendar(0) == "0000:00:00 00:00:00"
    assert render_calendar(1) == "1970:01:01 00:00:01Z"
    assert render_calendar(1401235200) == "2014:05:28 00:00:00Z"


@pytest.mark.parametrize("text,expected", [
    ("2010-05-01T00:00:00+00:00", "2010:05:01 00:00:00+00:00"),
    ("2010-05-01T12:30Z", "2010:05:01 12:30:00Z"),
    ("2010-05-01", "2010:05:01"),
    ("2010", "2010"),
    ("2010-05-01T08:15:30.25-0500", "2010:05:01 08:15:30.25-05:00"),
    ("sometime last year", "sometime last year"),
    ("", ""),
])
def test_convert_xmp_date(text, expected):
    assert convert_xmp_date(text) == expected
