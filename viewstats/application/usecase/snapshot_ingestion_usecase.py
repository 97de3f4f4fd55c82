import logging
import time
from datetime import datetime, timezone

from viewstats.application.port.snapshot_repository_port import SnapshotRepositoryPort
from viewstats.application.port.video_registry_port import VideoRegistryPort
from viewstats.application.port.video_stats_client_port import VideoStatsClientPort
from viewstats.application.usecase.quota_usecase import QuotaUseCase
from viewstats.domain.snapshot import Snapshot, ms_to_iso

logger = logging.getLogger(__name__)

MAX_IDS_PER_CALL = 50


class SnapshotIngestionUseCase:
    def __init__(
        self,
        client: VideoStatsClientPort,
        registry: VideoRegistryPort,
        snapshots: SnapshotRepositoryPort,
        quota: QuotaUseCase | None = None,
        retention_days: int = 30,
    ):
        # Polls every tracked video once and appends one snapshot per video.
        self.client = client
        self.registry = registry
        self.snapshots = snapshots
        self.quota = quota
        self.retention_days = retention_days

    def ingest_all(self, now: datetime | None = None) -> dict:
        started = time.perf_counter()
        now = now or datetime.now(timezone.utc)
        now_ms = int(now.timestamp() * 1000)

        videos, source = self.registry.load()
        names = {v.id: v.name for v in videos}
        video_ids = list(names)
        logger.info("[SNAPSHOT-BATCH] polling %d videos (config=%s)", len(video_ids), source)

        stats_by_id, fetch_errors = self._fetch_stats(video_ids, now)

        results = []
        for video_id in video_ids:
            name = names[video_id]
            if video_id in fetch_errors:
                results.append(self._failure(video_id, name, fetch_errors[video_id]))
                continue
            stats = stats_by_id.get(video_id)
            if stats is None:
                results.append(self._failure(video_id, name, "Video not found or not accessible"))
                continue

            snapshot = Snapshot(timestamp_ms=now_ms, views_total=stats.view_count, likes_total=stats.like_count)
            try:
                total_entries = self.snapshots.append(video_id, snapshot, name, self.retention_days)
            except RuntimeError as exc:
                logger.error("[SNAPSHOT-BATCH] storing %s failed: %s", video_id, exc)
                results.append(self._failure(video_id, name, str(exc)))
                continue

            logger.info("[SNAPSHOT-BATCH] %s (%s): %d views", name, video_id, stats.view_count)
            results.append(
                {
                    "video_id": video_id,
                    "video_name": name,
                    "success": True,
                    "view_count": stats.view_count,
                    "like_count": stats.like_count,
                    "total_entries": total_entries,
                    "timestamp": ms_to_iso(now_ms),
                }
            )

        successful = [r for r in results if r["success"]]
        return {
            "summary": {
                "total_videos": len(video_ids),
                "successful": len(successful),
                "failed": len(video_ids) - len(successful),
                "total_views": sum(r["view_count"] for r in successful),
            },
            "meta": {
                "timestamp": ms_to_iso(now_ms),
                "processing_time_ms": round((time.perf_counter() - started) * 1000),
            },
            "data": results,
        }

    def _fetch_stats(self, video_ids: list[str], now: datetime) -> tuple[dict, dict]:
        stats_by_id = {}
        errors = {}
        for start in range(0, len(video_ids), MAX_IDS_PER_CALL):
            chunk = video_ids[start:start + MAX_IDS_PER_CALL]
            try:
                fetched = self.client.fetch_many(chunk)
            except RuntimeError as exc:
                logger.error("[SNAPSHOT-BATCH] stats fetch failed for %d videos: %s", len(chunk), exc)
                errors.update({video_id: str(exc) for video_id in chunk})
                continue
            finally:
                if self.quota is not None:
                    self.quota.track_usage("videos.list", now=now)
            stats_by_id.update({s.video_id: s for s in fetched})
        return stats_by_id, errors

    @staticmethod
    def _failure(video_id: str, name: str, message: str) -> dict:
        return {"video_id": video_id, "video_name": name, "success": False, "error": message}
