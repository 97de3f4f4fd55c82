import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from viewstats.domain.snapshot import CurrentRecord, LegacyRecord, Snapshot
from viewstats.domain.timestamp import is_invalid, normalize_timestamp

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000

INVALID_FORMAT = "invalid_format"
NO_VALID_DATA = "no_valid_data"

HOURLY = "hourly"
DAILY = "daily"


@dataclass
class NormalizedSeries:
    """
    Result of normalize_series.
    - snapshots: canonical snapshots in input order (not sorted)
    - error: None, "invalid_format" or "no_valid_data"
    - dropped: number of rows discarded because their timestamp was unusable
    """
    snapshots: list[Snapshot] = field(default_factory=list)
    error: str | None = None
    dropped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_series(raw) -> NormalizedSeries:
    """
    Accepts either a flat list of rows (legacy names checked first) or a mapping
    with a "snapshots" list (current names checked first).
    """
    if isinstance(raw, list):
        items, legacy_first = raw, True
    elif isinstance(raw, Mapping) and isinstance(raw.get("snapshots"), list):
        items, legacy_first = raw["snapshots"], False
    else:
        logger.warning("Unrecognized snapshot container: %s", type(raw).__name__)
        return NormalizedSeries(error=INVALID_FORMAT)

    snapshots: list[Snapshot] = []
    rejected: list = []
    for item in items:
        record = _resolve_record(item, legacy_first)
        snapshot = _to_snapshot(record) if record is not None else None
        if snapshot is None:
            rejected.append(item)
            continue
        snapshots.append(snapshot)

    if rejected:
        logger.warning("Dropped %d snapshot rows with unusable timestamps (first: %r)", len(rejected), rejected[0])

    if not snapshots:
        return NormalizedSeries(error=NO_VALID_DATA, dropped=len(rejected))
    return NormalizedSeries(snapshots=snapshots, dropped=len(rejected))


def sort_series(series: Sequence[Snapshot]) -> list[Snapshot]:
    # sorted() is stable, so equal timestamps keep their input order
    return sorted(series, key=lambda s: s.timestamp_ms)


def filter_by_range(series: Sequence[Snapshot], now_ms: int, hours) -> list[Snapshot]:
    """Keep entries strictly newer than now - hours. "all", None and unusable values leave the series untouched."""
    window_hours = _parse_hours(hours)
    if window_hours is None:
        return list(series)
    cutoff = now_ms - window_hours * MS_PER_HOUR
    return [s for s in series if s.timestamp_ms > cutoff]


def resample(series: Sequence[Snapshot], granularity: str) -> list[Snapshot]:
    """
    Reduce to one snapshot per local-calendar hour or day; the latest snapshot in a bucket wins.
    """
    if not series:
        return []
    ordered = sort_series(series)
    if granularity not in (HOURLY, DAILY):
        return ordered

    buckets: dict[tuple, Snapshot] = {}
    for snapshot in ordered:
        key = _bucket_key(snapshot.timestamp_ms, granularity)
        kept = buckets.get(key)
        if kept is None or snapshot.timestamp_ms >= kept.timestamp_ms:
            buckets[key] = snapshot
    return sort_series(buckets.values())


def _bucket_key(timestamp_ms: int, granularity: str) -> tuple:
    local = datetime.fromtimestamp(timestamp_ms / 1000)
    if granularity == HOURLY:
        return (local.year, local.month, local.day, local.hour)
    return (local.year, local.month, local.day)


def _parse_hours(hours) -> float | None:
    if hours is None or isinstance(hours, bool):
        return None
    if isinstance(hours, str):
        text = hours.strip().lower()
        if not text or text == "all":
            return None
        try:
            hours = float(text)
        except ValueError:
            return None
    if not isinstance(hours, (int, float)) or not math.isfinite(hours) or hours <= 0:
        return None
    return hours


def _first_present(item: Mapping, *names):
    for name in names:
        value = item.get(name)
        if value is not None:
            return value
    return None


def _resolve_record(item, legacy_first: bool) -> LegacyRecord | CurrentRecord | None:
    if not isinstance(item, Mapping):
        return None
    legacy = LegacyRecord(
        timestamp=item.get("timestamp"),
        view_count=_first_present(item, "viewCount", "views_total"),
        like_count=_first_present(item, "likeCount", "likes_total"),
    )
    current = CurrentRecord(
        ts=item.get("ts"),
        views_total=_first_present(item, "views_total", "viewCount"),
        likes_total=_first_present(item, "likes_total", "likeCount"),
    )
    preferred, other = (legacy, current) if legacy_first else (current, legacy)
    if _record_timestamp(preferred) is None and _record_timestamp(other) is not None:
        return other
    return preferred


def _record_timestamp(record: LegacyRecord | CurrentRecord):
    return record.timestamp if isinstance(record, LegacyRecord) else record.ts


def _to_snapshot(record: LegacyRecord | CurrentRecord) -> Snapshot | None:
    if isinstance(record, LegacyRecord):
        raw_ts, raw_views, raw_likes = record.timestamp, record.view_count, record.like_count
    else:
        raw_ts, raw_views, raw_likes = record.ts, record.views_total, record.likes_total

    ts = normalize_timestamp(raw_ts)
    if is_invalid(ts):
        return None
    views = _coerce_count(raw_views)
    return Snapshot(
        timestamp_ms=ts,
        views_total=views if views is not None else 0,
        likes_total=_coerce_count(raw_likes),
    )


def _coerce_count(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value >= 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
