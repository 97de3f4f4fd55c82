import asyncio

from conftest import FIXED_NOW, HOUR, hourly_series
from viewstats.application.port.last24h_fallback_port import Last24hFallbackPort
from viewstats.application.usecase.statistics_usecase import StatisticsUseCase, aggregate_statistics
from viewstats.domain.rolling import INSUFFICIENT_DATA
from viewstats.domain.series import normalize_series
from viewstats.domain.snapshot import Snapshot
from viewstats.domain.statistics import SOURCE_CALENDAR_ESTIMATE, SOURCE_FALLBACK, SOURCE_LOCAL
from viewstats.domain.video_stats import OfficialViews


class StaticFallback(Last24hFallbackPort):
    def __init__(self, views):
        self.views = views
        self.calls = []

    async def fetch_official_last_24h(self, channel_id, timezone):
        self.calls.append((channel_id, timezone))
        if self.views is None:
            return None
        return OfficialViews(views_last_24h=self.views, window={"hours": 24})


class FailingFallback(Last24hFallbackPort):
    async def fetch_official_last_24h(self, channel_id, timezone):
        raise RuntimeError("analytics unavailable")


class SlowFallback(Last24hFallbackPort):
    async def fetch_official_last_24h(self, channel_id, timezone):
        await asyncio.sleep(5)
        return OfficialViews(views_last_24h=1, window={})


def _run(coro):
    return asyncio.run(coro)


def _today_series():
    # 2024-01-01 00:00 at UTC+8 is 2023-12-31T16:00Z
    midnight = FIXED_NOW - 8 * HOUR
    return [Snapshot(midnight + HOUR, 1000), Snapshot(midnight + 2 * HOUR, 1100), Snapshot(midnight + 3 * HOUR, 1300)]


def test_local_rolling_wins():
    series = hourly_series(25)
    fallback = StaticFallback(500)

    stats = _run(aggregate_statistics(series, series, FIXED_NOW, fallback=fallback))

    assert stats.views_last_24h.value == 2400
    assert stats.views_last_24h.source == SOURCE_LOCAL
    assert stats.views_last_24h.window_hours == 24
    assert fallback.calls == []


def test_fallback_used_when_local_is_insufficient():
    series = [Snapshot(FIXED_NOW, 1700)]
    fallback = StaticFallback(500)

    stats = _run(
        aggregate_statistics(series, series, FIXED_NOW, fallback=fallback, channel_id="UC123", timezone="Asia/Tokyo")
    )

    assert stats.views_last_24h.value == 500
    assert stats.views_last_24h.source == SOURCE_FALLBACK
    assert stats.views_last_24h.local_status == INSUFFICIENT_DATA
    assert fallback.calls == [("UC123", "Asia/Tokyo")]


def test_failing_fallback_leaves_24h_absent():
    series = [Snapshot(FIXED_NOW, 1700)]

    stats = _run(aggregate_statistics(series, series, FIXED_NOW, fallback=FailingFallback()))

    assert stats.views_last_24h.value is None
    assert stats.views_last_24h.source is None
    assert stats.views_last_24h.local_status == INSUFFICIENT_DATA


def test_slow_fallback_times_out():
    series = [Snapshot(FIXED_NOW, 1700)]
    usecase = StatisticsUseCase(fallback=SlowFallback(), fallback_timeout_seconds=0.05)

    stats = _run(usecase.aggregate(series, series, FIXED_NOW))

    assert stats.views_last_24h.value is None


def test_fallback_returning_none_is_skipped():
    series = [Snapshot(FIXED_NOW, 1700)]

    stats = _run(aggregate_statistics(series, series, FIXED_NOW, fallback=StaticFallback(None)))

    assert stats.views_last_24h.source is None


def test_calendar_estimate_after_failed_fallback(monkeypatch):
    from viewstats.application.usecase import statistics_usecase
    from viewstats.domain.rolling import RollingResult

    monkeypatch.setattr(
        statistics_usecase,
        "compute_rolling_24h",
        lambda series, now_ms: RollingResult(status=INSUFFICIENT_DATA, count=len(series)),
    )
    raw = _today_series()
    now = FIXED_NOW - 4 * HOUR

    stats = _run(aggregate_statistics(raw, raw, now, fallback=FailingFallback()))

    assert stats.views_last_24h.value == 300
    assert stats.views_last_24h.source == SOURCE_CALENDAR_ESTIMATE
    assert stats.views_last_24h.is_estimate is True
    assert stats.views_last_24h.window_hours == 2


def test_reductions_over_processed_series():
    raw = hourly_series(25)
    processed = [Snapshot(FIXED_NOW - 2 * HOUR, 1000, 10), Snapshot(FIXED_NOW - HOUR, 1500), Snapshot(FIXED_NOW, 2000, 30)]

    payload = _run(aggregate_statistics(raw, processed, FIXED_NOW)).to_dict()

    assert payload["summary"]["total_records"] == 25
    assert payload["summary"]["filtered_records"] == 3
    assert payload["changes"] == {"total_change": 1000, "total_change_percent": 100.0}
    assert payload["peaks"] == {"max": 2000, "min": 1000, "avg": 1500}
    assert payload["likes"] == {"max": 30, "min": 10, "avg": 20}
    assert payload["current"]["view_count"] == 2000
    assert payload["views_last_24h"]["source"] == SOURCE_LOCAL


def test_percent_change_omitted_from_zero():
    processed = [Snapshot(FIXED_NOW - HOUR, 0), Snapshot(FIXED_NOW, 50)]

    stats = _run(aggregate_statistics(processed, processed, FIXED_NOW))

    assert stats.total_change == 50
    assert stats.total_change_percent is None
    assert stats.likes is None


def test_far_future_row_is_dropped_before_aggregation():
    normalized = normalize_series(
        [
            {"ts": FIXED_NOW - 24 * HOUR, "views_total": 1000},
            {"ts": 10**16, "views_total": 1},
            {"ts": FIXED_NOW, "views_total": 1700},
        ]
    )

    payload = _run(aggregate_statistics(normalized.snapshots, normalized.snapshots, FIXED_NOW)).to_dict()

    assert normalized.dropped == 1
    assert payload["views_last_24h"]["value"] == 700
    assert payload["views_last_24h"]["source"] == SOURCE_LOCAL
