import math

import pytest

from viewstats.domain.timestamp import INVALID, MAX_TIMESTAMP_MS, is_invalid, normalize_timestamp

FIXED_NOW = 1704067200000


@pytest.mark.parametrize(
    "value, expected",
    [
        (FIXED_NOW, FIXED_NOW),
        (0, 0),
        (1704067200123.9, 1704067200123),
        ("2024-01-01T00:00:00.000Z", FIXED_NOW),
        ("2024-01-01T00:00:00Z", FIXED_NOW),
        ("2024-01-01T08:00:00+08:00", FIXED_NOW),
        ("2024-01-01T00:00:00", FIXED_NOW),
        ("  2023-12-31T12:00:00.000Z ", FIXED_NOW - 12 * 3_600_000),
    ],
)
def test_normalize_accepts_numbers_and_iso_strings(value, expected):
    assert normalize_timestamp(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, True, False, -1, -0.5, math.nan, math.inf, "", "   ", "invalid-iso-string", "1969-12-31T23:59:59Z", [], {}],
)
def test_normalize_rejects_unusable_values(value):
    assert is_invalid(normalize_timestamp(value))


def test_invalid_is_a_falsy_singleton():
    assert normalize_timestamp(None) is INVALID
    assert not INVALID
    assert repr(INVALID) == "INVALID"


def test_iso_and_epoch_forms_agree():
    assert normalize_timestamp("2024-01-01T00:00:00.000Z") == normalize_timestamp(FIXED_NOW)


@pytest.mark.parametrize(
    "value", [10**16, 1e16, MAX_TIMESTAMP_MS + 1, "9999-12-31T00:00:00Z", "9999-12-31T23:59:59.999Z"]
)
def test_normalize_rejects_instants_past_the_calendar(value):
    assert is_invalid(normalize_timestamp(value))


def test_latest_accepted_instant():
    assert normalize_timestamp(MAX_TIMESTAMP_MS) == MAX_TIMESTAMP_MS
    assert normalize_timestamp("9999-12-30T23:59:59.999Z") == MAX_TIMESTAMP_MS
