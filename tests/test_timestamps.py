import pytest

from common.timestamps import epoch_ms_from_iso8601, sort_key_ms


def test_parses_zulu():
    assert epoch_ms_from_iso8601("1970-01-01T00:00:01Z") == 1000
    assert epoch_ms_from_iso8601("2020-01-01T00:00:00.000Z") == 1577836800000


def test_offset_and_naive():
    assert epoch_ms_from_iso8601("1970-01-01T01:00:00+01:00") == 0
    assert epoch_ms_from_iso8601("1970-01-01T00:00:02") == 2000


@pytest.mark.parametrize("value", [None, "", "  ", "yesterday", 12])
def test_unparsable(value):
    assert epoch_ms_from_iso8601(value) is None
    assert sort_key_ms(value) == 0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2020-11-30T15:45:17.45Z", 1606751117450),
        ("2020-11-30T15:45:17.4Z", 1606751117400),
        ("2020-11-30T15:45:17.4512345Z", 1606751117451),
        ("2020-11-30T15:45:17.45+00:00", 1606751117450),
    ],
)
def test_variable_fraction_digits(value, expected):
    assert epoch_ms_from_iso8601(value) == expected


def test_short_fraction_sorts_after_older_timestamp():
    assert sort_key_ms("2020-11-30T15:45:17.45Z") > sort_key_ms("2019-01-01T00:00:00.000Z")
