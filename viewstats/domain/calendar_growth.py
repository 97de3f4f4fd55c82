from collections.abc import Sequence
from dataclasses import dataclass

from viewstats.domain.rolling import MS_24H, OK, INSUFFICIENT_DATA
from viewstats.domain.series import MS_PER_HOUR, sort_series
from viewstats.domain.snapshot import Snapshot

DEFAULT_UTC_OFFSET_HOURS = 8


@dataclass
class GrowthResult:
    """Views gained since local midnight of a fixed-offset calendar day. Only an estimate of 24h growth."""
    status: str
    sample_count: int
    growth: int | None = None
    first_sample: Snapshot | None = None
    last_sample: Snapshot | None = None
    day_start_ms: int | None = None
    day_end_ms: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == OK

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "growth": self.growth,
            "first_sample": self.first_sample.to_dict() if self.first_sample else None,
            "last_sample": self.last_sample.to_dict() if self.last_sample else None,
            "sample_count": self.sample_count,
            "is_estimate": True,
        }


def day_window(now_ms: int, utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS) -> tuple[int, int]:
    """UTC bounds [start, end) of the civil day containing now_ms at the given fixed offset."""
    offset_ms = int(utc_offset_hours * MS_PER_HOUR)
    local_ms = now_ms + offset_ms
    local_midnight = local_ms - (local_ms % MS_24H)
    start = local_midnight - offset_ms
    return start, start + MS_24H


def compute_calendar_day_growth(
    series: Sequence[Snapshot],
    now_ms: int,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
) -> GrowthResult:
    start, end = day_window(now_ms, utc_offset_hours)
    today = [s for s in sort_series(series) if start <= s.timestamp_ms < end]
    if len(today) < 2:
        return GrowthResult(status=INSUFFICIENT_DATA, sample_count=len(today), day_start_ms=start, day_end_ms=end)

    first, last = today[0], today[-1]
    return GrowthResult(
        status=OK,
        sample_count=len(today),
        growth=max(0, last.views_total - first.views_total),
        first_sample=first,
        last_sample=last,
        day_start_ms=start,
        day_end_ms=end,
    )
