import asyncio
import logging
from collections.abc import Sequence

from viewstats.application.port.last24h_fallback_port import Last24hFallbackPort
from viewstats.domain.calendar_growth import DEFAULT_UTC_OFFSET_HOURS, compute_calendar_day_growth
from viewstats.domain.rolling import compute_rolling_24h
from viewstats.domain.series import sort_series
from viewstats.domain.snapshot import Snapshot
from viewstats.domain.statistics import (
    SOURCE_CALENDAR_ESTIMATE,
    SOURCE_FALLBACK,
    SOURCE_LOCAL,
    CountReduction,
    ViewsLast24h,
    ViewStatistics,
)
from viewstats.domain.video_stats import OfficialViews

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TIMEOUT_SECONDS = 10.0


class StatisticsUseCase:
    def __init__(
        self,
        fallback: Last24hFallbackPort | None = None,
        channel_id: str | None = None,
        timezone: str | None = None,
        fallback_timeout_seconds: float = DEFAULT_FALLBACK_TIMEOUT_SECONDS,
        utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
    ):
        # The fallback adapter is optional; without it the chain goes straight to the calendar-day estimate.
        self.fallback = fallback
        self.channel_id = channel_id
        self.timezone = timezone
        self.fallback_timeout_seconds = fallback_timeout_seconds
        self.utc_offset_hours = utc_offset_hours

    async def aggregate(
        self, raw_series: Sequence[Snapshot], processed_series: Sequence[Snapshot], now_ms: int
    ) -> ViewStatistics:
        return await aggregate_statistics(
            raw_series,
            processed_series,
            now_ms,
            fallback=self.fallback,
            channel_id=self.channel_id,
            timezone=self.timezone,
            fallback_timeout_seconds=self.fallback_timeout_seconds,
            utc_offset_hours=self.utc_offset_hours,
        )


async def aggregate_statistics(
    raw_series: Sequence[Snapshot],
    processed_series: Sequence[Snapshot],
    now_ms: int,
    fallback: Last24hFallbackPort | None = None,
    channel_id: str | None = None,
    timezone: str | None = None,
    fallback_timeout_seconds: float = DEFAULT_FALLBACK_TIMEOUT_SECONDS,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
) -> ViewStatistics:
    """
    Build the statistics block for one video.
    - raw_series: every stored snapshot (unfiltered); used for the 24h and today figures
    - processed_series: what the chart shows (range-filtered / resampled); used for peaks and changes
    The 24h figure comes from, in order: local rolling window, fallback adapter, today's growth estimate.
    """
    processed = sort_series(processed_series)
    stats = ViewStatistics(total_records=len(raw_series), filtered_records=len(processed))
    _fill_reductions(stats, processed)

    rolling = compute_rolling_24h(raw_series, now_ms)
    growth = compute_calendar_day_growth(raw_series, now_ms, utc_offset_hours)
    stats.rolling = rolling
    stats.today_growth = growth

    if rolling.ok:
        stats.views_last_24h = ViewsLast24h(
            value=rolling.delta_views,
            source=SOURCE_LOCAL,
            window_hours=rolling.window_hours,
            base_timestamp=rolling.base_sample.timestamp_ms,
            current_timestamp=rolling.current_sample.timestamp_ms,
            local_status=rolling.status,
            warnings=list(rolling.warnings),
        )
        return stats

    official = await _fetch_fallback(fallback, channel_id, timezone, fallback_timeout_seconds)
    if official is not None:
        stats.views_last_24h = ViewsLast24h(
            value=official.views_last_24h,
            source=SOURCE_FALLBACK,
            window=official.window,
            local_status=rolling.status,
            message="Local history is too short; using the official YouTube Analytics count.",
        )
        return stats

    if growth.ok:
        stats.views_last_24h = ViewsLast24h(
            value=growth.growth,
            source=SOURCE_CALENDAR_ESTIMATE,
            is_estimate=True,
            window_hours=(growth.last_sample.timestamp_ms - growth.first_sample.timestamp_ms) / 3_600_000,
            base_timestamp=growth.first_sample.timestamp_ms,
            current_timestamp=growth.last_sample.timestamp_ms,
            local_status=rolling.status,
            message=f"Estimated from today's growth (UTC{utc_offset_hours:+g}); less than 24h of history.",
        )
        return stats

    stats.views_last_24h = ViewsLast24h(
        local_status=rolling.status,
        message="Not enough data to compute views for the last 24 hours.",
    )
    return stats


async def _fetch_fallback(
    fallback: Last24hFallbackPort | None,
    channel_id: str | None,
    timezone: str | None,
    timeout_seconds: float,
) -> OfficialViews | None:
    if fallback is None:
        return None
    try:
        result = await asyncio.wait_for(
            fallback.fetch_official_last_24h(channel_id, timezone),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning("24h fallback timed out after %.1fs (channel=%s)", timeout_seconds, channel_id)
        return None
    except Exception as exc:
        logger.warning("24h fallback failed (channel=%s): %s", channel_id, exc)
        return None

    if result is None or isinstance(result.views_last_24h, bool) or not isinstance(result.views_last_24h, int):
        return None
    return result


def _fill_reductions(stats: ViewStatistics, processed: list[Snapshot]) -> None:
    if not processed:
        return

    earliest, latest = processed[0], processed[-1]
    stats.date_range_start = earliest.timestamp_ms
    stats.date_range_end = latest.timestamp_ms
    stats.current = latest
    stats.earliest = earliest

    stats.total_change = latest.views_total - earliest.views_total
    if earliest.views_total > 0:
        stats.total_change_percent = round(stats.total_change / earliest.views_total * 100, 2)

    stats.views = _reduce([s.views_total for s in processed])
    likes = [s.likes_total for s in processed if s.likes_total is not None]
    if likes:
        stats.likes = _reduce(likes)


def _reduce(values: list[int]) -> CountReduction:
    return CountReduction(max=max(values), min=min(values), avg=round(sum(values) / len(values)))
