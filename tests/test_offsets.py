import pytest

from estimation.models import NumericOffset, TextOffset
from estimation.offsets import day_label, normalize_offset, offset_from_raw, parse_offset_days


@pytest.mark.parametrize("raw, expected", [
    ("Same Day", 0),
    ("same day delivery", 0),
    ("0", 0),
    ("1 day", 1),
    ("1", 1),
    ("Next: 1 day", 1),
    ("2 days", 2),
    ("2", 2),
    ("3", 3),
    ("10 days", 10),
    ("11 days", 11),
    ("12", 12),
    ("21 days", 21),
    ("within 5 business days", 5),
    (None, 0),
    ("garbage", 0),
    (4, 4),
    (1.0, 1),
])
def test_normalize_offset_from_raw_values(raw, expected):
    """
    Stored offsets come as numbers or free text; all end up as whole days.
    """
    assert normalize_offset(offset_from_raw(raw)) == expected


def test_unreadable_offsets_use_the_given_default():
    assert normalize_offset(TextOffset("soon"), default=2) == 2
    assert normalize_offset(None, default=1) == 1
    assert normalize_offset(NumericOffset(-3), default=1) == 1


def test_parse_offset_days_reports_unreadable_values_as_none():
    assert parse_offset_days(TextOffset("garbage")) is None
    assert parse_offset_days(None) is None
    assert parse_offset_days(NumericOffset(0)) == 0


def test_offset_from_raw_wraps_the_tagged_union():
    assert offset_from_raw(2) == NumericOffset(2)
    assert offset_from_raw(" 2 days ") == TextOffset("2 days")
    assert offset_from_raw("") is None
    assert offset_from_raw(float("nan")) is None


def test_day_labels():
    assert day_label(0) == "Same Day"
    assert day_label(1) == "1 day"
    assert day_label(2) == "2 days"
    assert day_label(7) == "7 days"
