import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from viewstats.domain.series import MS_PER_HOUR, normalize_series, sort_series
from viewstats.domain.snapshot import Snapshot

logger = logging.getLogger(__name__)

MS_24H = 24 * MS_PER_HOUR
MIN_WINDOW_HOURS = 23.5
DEGRADED_WINDOW_HOURS = 22.0

OK = "ok"
INSUFFICIENT_DATA = "insufficient_data"
NO_BASE_FOUND = "no_base_found"

DEGRADED_WINDOW = "degraded_window"
COUNT_REGRESSION = "count_regression"


@dataclass
class RollingResult:
    """
    Views gained over the trailing 24 hours.
    status is "ok" or one of insufficient_data / invalid_format / no_valid_data / no_base_found;
    delta_views, samples and window_hours are only set when status is "ok".
    """
    status: str
    delta_views: int | None = None
    current_sample: Snapshot | None = None
    base_sample: Snapshot | None = None
    window_hours: float | None = None
    reason: str | None = None
    count: int | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == OK

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "delta_views": self.delta_views,
            "current_sample": self.current_sample.to_dict() if self.current_sample else None,
            "base_sample": self.base_sample.to_dict() if self.base_sample else None,
            "window_hours": round(self.window_hours, 2) if self.window_hours is not None else None,
            "reason": self.reason,
            "count": self.count,
            "warnings": list(self.warnings),
        }


def compute_rolling_24h(series: Sequence[Snapshot], now_ms: int) -> RollingResult:
    if len(series) < 2:
        logger.warning("Rolling 24h needs at least 2 snapshots, got %d", len(series))
        return RollingResult(
            status=INSUFFICIENT_DATA,
            reason=f"need at least 2 snapshots, got {len(series)}",
            count=len(series),
        )

    ordered = sort_series(series)
    current = _select_current(ordered, now_ms)
    boundary = now_ms - MS_24H

    base = _nearest_to(ordered, boundary)
    if base is None:
        return RollingResult(status=NO_BASE_FOUND, reason="no snapshot near the 24h boundary", count=len(ordered))

    warnings: list[str] = []
    window_hours = _window_hours(current, base)
    if window_hours < MIN_WINDOW_HOURS:
        earlier = _latest_before(ordered, boundary)
        if earlier is not None and _window_hours(current, earlier) >= MIN_WINDOW_HOURS:
            base = earlier
            window_hours = _window_hours(current, base)

    if window_hours < DEGRADED_WINDOW_HOURS:
        logger.warning("Rolling 24h window is only %.2fh (base=%s, current=%s)", window_hours, base.iso, current.iso)
        warnings.append(DEGRADED_WINDOW)

    raw_delta = current.views_total - base.views_total
    if raw_delta < 0:
        logger.warning(
            "View count went backwards by %d between %s and %s; clamping to 0",
            -raw_delta,
            base.iso,
            current.iso,
        )
        warnings.append(COUNT_REGRESSION)

    return RollingResult(
        status=OK,
        delta_views=max(0, raw_delta),
        current_sample=current,
        base_sample=base,
        window_hours=window_hours,
        count=len(ordered),
        warnings=warnings,
    )


def compute_views_last_24h(raw, now_ms: int) -> RollingResult:
    """Normalize a stored blob and run the rolling engine, folding format errors into the result."""
    normalized = normalize_series(raw)
    if not normalized.ok:
        return RollingResult(status=normalized.error, reason=normalized.error, count=0)
    return compute_rolling_24h(normalized.snapshots, now_ms)


def _select_current(ordered: list[Snapshot], now_ms: int) -> Snapshot:
    for snapshot in reversed(ordered):
        if snapshot.timestamp_ms <= now_ms:
            return snapshot
    # every sample is ahead of the reference clock
    return ordered[-1]


def _nearest_to(ordered: list[Snapshot], target_ms: int) -> Snapshot | None:
    best = None
    best_distance = None
    for snapshot in ordered:
        distance = abs(snapshot.timestamp_ms - target_ms)
        if best_distance is None or distance < best_distance:
            best, best_distance = snapshot, distance
    return best


def _latest_before(ordered: list[Snapshot], target_ms: int) -> Snapshot | None:
    found = None
    for snapshot in ordered:
        if snapshot.timestamp_ms >= target_ms:
            break
        found = snapshot
    return found


def _window_hours(current: Snapshot, base: Snapshot) -> float:
    return (current.timestamp_ms - base.timestamp_ms) / MS_PER_HOUR
