from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class Snapshot:
    """
    One timestamped observation of a video's cumulative view (and optionally like) count.
    - timestamp_ms: epoch milliseconds, non-negative
    - views_total: cumulative views at that instant
    """
    timestamp_ms: int
    views_total: int
    likes_total: Optional[int] = None

    @property
    def iso(self) -> str:
        return ms_to_iso(self.timestamp_ms)

    def to_record(self) -> dict:
        """Canonical stored shape; feeding it back through normalize_series yields the same snapshot."""
        record = {"ts": self.timestamp_ms, "views_total": self.views_total}
        if self.likes_total is not None:
            record["likes_total"] = self.likes_total
        return record

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp_ms,
            "date": self.iso,
            "view_count": self.views_total,
            "like_count": self.likes_total,
        }


@dataclass(frozen=True)
class LegacyRecord:
    # Flat-array rows written by the first tracker revision: timestamp / viewCount / likeCount
    timestamp: object
    view_count: object
    like_count: object = None


@dataclass(frozen=True)
class CurrentRecord:
    # Rows inside the {"snapshots": [...]} wrapper: ts / views_total / likes_total
    ts: object
    views_total: object
    likes_total: object = None


def ms_to_iso(timestamp_ms: int) -> str:
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
