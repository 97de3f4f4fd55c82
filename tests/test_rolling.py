import pytest

from conftest import FIXED_NOW, HOUR, hourly_series
from viewstats.domain.rolling import (
    COUNT_REGRESSION,
    DEGRADED_WINDOW,
    INSUFFICIENT_DATA,
    OK,
    compute_rolling_24h,
    compute_views_last_24h,
)
from viewstats.domain.series import INVALID_FORMAT, NO_VALID_DATA
from viewstats.domain.snapshot import Snapshot

H24 = 24 * HOUR


@pytest.mark.parametrize(
    "raw, expected",
    [
        (
            [
                {"ts": FIXED_NOW - 2 * H24, "views_total": 1000},
                {"ts": FIXED_NOW - H24, "views_total": 1200},
                {"ts": FIXED_NOW - 12 * HOUR, "views_total": 1400},
                {"ts": FIXED_NOW, "views_total": 1700},
            ],
            500,
        ),
        ([{"ts": FIXED_NOW - H24, "views_total": 1200}, {"ts": FIXED_NOW, "views_total": 1700}], 500),
        (
            [
                {"timestamp": FIXED_NOW - 2 * H24, "viewCount": 1000},
                {"timestamp": FIXED_NOW - H24, "viewCount": 1200},
                {"timestamp": FIXED_NOW, "viewCount": 1700},
            ],
            500,
        ),
        ([{"ts": FIXED_NOW - 12 * HOUR, "views_total": 1400}, {"ts": FIXED_NOW, "views_total": 1700}], 300),
        (
            [
                {"ts": "2023-12-31T12:00:00.000Z", "views_total": 1000},
                {"ts": FIXED_NOW - H24, "views_total": 1200},
                {"ts": FIXED_NOW, "views_total": 1700},
            ],
            500,
        ),
        ([{"ts": FIXED_NOW - 2 * H24, "views_total": 1000}, {"ts": "2024-01-01T00:00:00.000Z", "views_total": 1700}], 700),
        (
            [
                {"ts": "invalid-iso-string", "views_total": 1000},
                {"ts": None, "views_total": 1100},
                {"ts": FIXED_NOW - H24, "views_total": 1200},
                {"ts": FIXED_NOW, "views_total": 1700},
            ],
            500,
        ),
    ],
    ids=["normal", "two-points", "legacy-fields", "short-history", "iso-base", "mixed-encodings", "skips-invalid"],
)
def test_views_last_24h_reference_cases(raw, expected):
    result = compute_views_last_24h(raw, FIXED_NOW)

    assert result.status == OK
    assert result.delta_views == expected


def test_single_snapshot_is_insufficient():
    result = compute_views_last_24h([{"ts": FIXED_NOW, "views_total": 1700}], FIXED_NOW)

    assert result.status == INSUFFICIENT_DATA
    assert result.count == 1
    assert result.delta_views is None


def test_format_errors_become_statuses():
    assert compute_views_last_24h("garbage", FIXED_NOW).status == INVALID_FORMAT
    assert compute_views_last_24h([{"ts": "x"}], FIXED_NOW).status == NO_VALID_DATA


def test_clean_hourly_day():
    result = compute_rolling_24h(hourly_series(25), FIXED_NOW)

    assert result.status == OK
    assert result.delta_views == 2400
    assert result.window_hours == 24
    assert result.warnings == []


def test_short_window_corrected_with_earlier_sample():
    # nearest to the boundary is 23h20m old; the 25h-old sample gives a full window
    series = [
        Snapshot(FIXED_NOW - 25 * HOUR, 900),
        Snapshot(FIXED_NOW - 23 * HOUR - 20 * 60_000, 1000),
        Snapshot(FIXED_NOW, 1500),
    ]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.base_sample.views_total == 900
    assert result.window_hours == 25
    assert result.delta_views == 600


def test_short_window_kept_when_no_better_base():
    series = [Snapshot(FIXED_NOW - 23 * HOUR, 1000), Snapshot(FIXED_NOW, 1500)]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.delta_views == 500
    assert result.window_hours == 23
    assert DEGRADED_WINDOW not in result.warnings


def test_degraded_window_warning():
    series = [Snapshot(FIXED_NOW - 12 * HOUR, 1400), Snapshot(FIXED_NOW, 1700)]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.delta_views == 300
    assert DEGRADED_WINDOW in result.warnings


def test_future_samples_are_not_current():
    series = [
        Snapshot(FIXED_NOW - H24, 1000),
        Snapshot(FIXED_NOW, 1500),
        Snapshot(FIXED_NOW + 2 * HOUR, 9999),
    ]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.current_sample.views_total == 1500
    assert result.delta_views == 500


def test_all_samples_in_future_uses_latest():
    series = [Snapshot(FIXED_NOW + HOUR, 1000), Snapshot(FIXED_NOW + 2 * HOUR, 1200)]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.current_sample.views_total == 1200


def test_count_regression_is_clamped():
    series = [Snapshot(FIXED_NOW - H24, 2000), Snapshot(FIXED_NOW, 1500)]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.delta_views == 0
    assert COUNT_REGRESSION in result.warnings


def test_equidistant_base_prefers_earlier_sample():
    series = [
        Snapshot(FIXED_NOW - 25 * HOUR, 800),
        Snapshot(FIXED_NOW - 23 * HOUR, 900),
        Snapshot(FIXED_NOW, 1000),
    ]

    result = compute_rolling_24h(series, FIXED_NOW)

    assert result.base_sample.views_total == 800


def test_result_serializes():
    payload = compute_rolling_24h(hourly_series(25), FIXED_NOW).to_dict()

    assert payload["status"] == OK
    assert payload["delta_views"] == 2400
    assert payload["current_sample"]["date"] == "2024-01-01T00:00:00.000Z"
