import logging
from typing import Iterable, List

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import YouTubeSettings
from viewstats.application.port.video_stats_client_port import VideoStatsClientPort
from viewstats.domain.video_stats import VideoStats

logger = logging.getLogger(__name__)

MAX_IDS_PER_CALL = 50


def chunk_ids(video_ids: List[str], size: int = MAX_IDS_PER_CALL) -> List[List[str]]:
    return [video_ids[i:i + size] for i in range(0, len(video_ids), size)]


class YouTubeStatsClient(VideoStatsClientPort):
    platform = "youtube"

    def __init__(self, settings: YouTubeSettings, service=None):
        # Data API v3, statistics part only (1 quota unit per videos.list call).
        self.settings = settings
        self.service = service or build(
            "youtube",
            "v3",
            developerKey=settings.api_key,
            cache_discovery=False,
        )

    def fetch_current_stats(self, video_id: str) -> VideoStats:
        stats = list(self.fetch_many([video_id]))
        if not stats:
            raise ValueError(f"Video not found: {video_id}")
        return stats[0]

    def fetch_many(self, video_ids: List[str]) -> Iterable[VideoStats]:
        results: List[VideoStats] = []
        for chunk in chunk_ids(list(video_ids)):
            results.extend(self._fetch_chunk(chunk))
        return results

    def _fetch_chunk(self, video_ids: List[str]) -> List[VideoStats]:
        if not video_ids:
            return []
        params = {"part": "statistics", "id": ",".join(video_ids)}
        if self.settings.quota_user:
            params["quotaUser"] = self.settings.quota_user
        try:
            response = self.service.videos().list(**params).execute(num_retries=3)
        except HttpError as exc:
            raise RuntimeError(f"YouTube videos.list failed: {exc}") from exc

        stats: List[VideoStats] = []
        for item in response.get("items", []):
            counters = item.get("statistics", {})
            stats.append(
                VideoStats(
                    video_id=item["id"],
                    view_count=int(counters.get("viewCount", 0)),
                    like_count=int(counters["likeCount"]) if counters.get("likeCount") else None,
                )
            )
        missing = set(video_ids) - {s.video_id for s in stats}
        if missing:
            logger.warning("videos.list returned no statistics for %s", ", ".join(sorted(missing)))
        return stats
