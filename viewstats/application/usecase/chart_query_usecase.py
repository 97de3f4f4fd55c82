import logging
import time
import uuid
from datetime import datetime, timezone

from viewstats.application.port.snapshot_repository_port import SnapshotRepositoryPort
from viewstats.application.port.video_registry_port import VideoRegistryPort
from viewstats.application.usecase.statistics_usecase import StatisticsUseCase
from viewstats.domain.errors import InvalidVideoIdError, VideoNotTrackedError
from viewstats.domain.series import filter_by_range, normalize_series, resample, sort_series
from viewstats.domain.snapshot import ms_to_iso
from viewstats.domain.tracked_video import DEFAULT_COLOR, is_valid_video_id

logger = logging.getLogger(__name__)


def parse_limit(limit) -> int | None:
    if limit is None or isinstance(limit, bool):
        return None
    try:
        value = int(str(limit).strip())
    except ValueError:
        return None
    return value if value > 0 else None


class ChartQueryUseCase:
    def __init__(
        self,
        registry: VideoRegistryPort,
        snapshots: SnapshotRepositoryPort,
        statistics: StatisticsUseCase | None = None,
    ):
        self.registry = registry
        self.snapshots = snapshots
        self.statistics = statistics or StatisticsUseCase()

    async def query(
        self,
        video_id: str,
        range_hours="all",
        interval: str | None = None,
        with_stats: bool = False,
        limit=None,
        now_ms: int | None = None,
    ) -> dict:
        """
        Chart payload for one tracked video.
        - range_hours: keep samples newer than now - N hours ("all" keeps everything)
        - interval: "hourly" / "daily" keeps the last sample per local bucket
        - limit: keep the last N points after resampling
        Statistics are computed over the full stored series and the points returned.
        """
        started = time.perf_counter()
        request_id = f"api_{uuid.uuid4().hex[:12]}"
        now_ms = now_ms if now_ms is not None else int(datetime.now(timezone.utc).timestamp() * 1000)

        if not is_valid_video_id(video_id):
            raise InvalidVideoIdError(f"Invalid YouTube video id: {video_id!r}")
        videos, _ = self.registry.load()
        video = next((v for v in videos if v.id == video_id), None)
        if video is None:
            raise VideoNotTrackedError(f"Video {video_id} is not tracked")

        logger.info("[CHART-DATA] %s video=%s range=%s interval=%s", request_id, video_id, range_hours, interval)

        normalized = normalize_series(self.snapshots.load_raw(video_id))
        ordered = sort_series(normalized.snapshots)

        processed = filter_by_range(ordered, now_ms, range_hours)
        if interval:
            processed = resample(processed, interval)
        max_points = parse_limit(limit)
        if max_points is not None:
            processed = processed[-max_points:]

        statistics = None
        if with_stats and processed:
            aggregated = await self.statistics.aggregate(ordered, processed, now_ms)
            statistics = aggregated.to_dict()

        return {
            "data": [s.to_dict() for s in processed],
            "video_info": {
                "id": video.id,
                "name": video.name or video.id,
                "color": video.color or DEFAULT_COLOR,
                "description": video.description or f"YouTube video: {video.id}",
            },
            "meta": {
                "request_id": request_id,
                "requested_at": ms_to_iso(now_ms),
                "processing_time_ms": round((time.perf_counter() - started) * 1000),
                "video_id": video_id,
                "params": {"range": range_hours, "interval": interval, "stats": with_stats, "limit": limit},
                "stored_count": len(ordered),
                "returned_count": len(processed),
                "dropped_records": normalized.dropped,
            },
            "statistics": statistics,
        }
