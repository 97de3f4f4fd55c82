from dataclasses import dataclass, field
from typing import Optional

from viewstats.domain.calendar_growth import GrowthResult
from viewstats.domain.rolling import RollingResult
from viewstats.domain.snapshot import Snapshot, ms_to_iso

SOURCE_LOCAL = "local"
SOURCE_FALLBACK = "fallback"
SOURCE_CALENDAR_ESTIMATE = "calendar_day_estimate"


@dataclass
class ViewsLast24h:
    """
    Trailing 24h views as surfaced to callers. value is None when nothing could produce it;
    0 is a real measurement.
    """
    value: Optional[int] = None
    source: Optional[str] = None
    is_estimate: bool = False
    window_hours: Optional[float] = None
    base_timestamp: Optional[int] = None
    current_timestamp: Optional[int] = None
    window: Optional[dict] = None
    local_status: Optional[str] = None
    message: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "source": self.source,
            "is_estimate": self.is_estimate,
            "window_hours": round(self.window_hours, 2) if self.window_hours is not None else None,
            "base_timestamp": self.base_timestamp,
            "current_timestamp": self.current_timestamp,
            "window": self.window,
            "local_status": self.local_status,
            "message": self.message,
            "warnings": list(self.warnings),
        }


@dataclass
class CountReduction:
    max: Optional[int] = None
    min: Optional[int] = None
    avg: Optional[int] = None

    def to_dict(self) -> dict:
        return {"max": self.max, "min": self.min, "avg": self.avg}


@dataclass
class ViewStatistics:
    total_records: int
    filtered_records: int
    date_range_start: Optional[int] = None
    date_range_end: Optional[int] = None
    current: Optional[Snapshot] = None
    earliest: Optional[Snapshot] = None
    total_change: Optional[int] = None
    total_change_percent: Optional[float] = None
    views: CountReduction = field(default_factory=CountReduction)
    likes: Optional[CountReduction] = None
    views_last_24h: ViewsLast24h = field(default_factory=ViewsLast24h)
    rolling: Optional[RollingResult] = None
    today_growth: Optional[GrowthResult] = None

    def to_dict(self) -> dict:
        return {
            "summary": {
                "total_records": self.total_records,
                "filtered_records": self.filtered_records,
                "date_range": {
                    "start": ms_to_iso(self.date_range_start) if self.date_range_start is not None else None,
                    "end": ms_to_iso(self.date_range_end) if self.date_range_end is not None else None,
                },
            },
            "current": self.current.to_dict() if self.current else None,
            "earliest": self.earliest.to_dict() if self.earliest else None,
            "changes": {
                "total_change": self.total_change,
                "total_change_percent": self.total_change_percent,
            },
            "peaks": self.views.to_dict(),
            "likes": self.likes.to_dict() if self.likes else None,
            "views_last_24h": self.views_last_24h.to_dict(),
            "rolling_24h": self.rolling.to_dict() if self.rolling else None,
            "today_growth": self.today_growth.to_dict() if self.today_growth else None,
        }
