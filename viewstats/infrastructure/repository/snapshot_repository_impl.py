import json
import logging
from datetime import datetime, timezone

from viewstats.application.port.blob_store_port import BlobStorePort
from viewstats.application.port.snapshot_repository_port import SnapshotRepositoryPort
from viewstats.domain.rolling import MS_24H
from viewstats.domain.snapshot import Snapshot
from viewstats.domain.timestamp import is_invalid, normalize_timestamp

logger = logging.getLogger(__name__)

LEGACY_DATA_KEY = "youtube-data.json"


def data_key(video_id: str) -> str:
    return f"youtube-data-{video_id}.json"


class SnapshotRepositoryImpl(SnapshotRepositoryPort):
    def __init__(self, blob_store: BlobStorePort, legacy_data_video_id: str | None = None):
        # The very first tracked video was stored under a single un-suffixed file before multi-video support.
        self.blob_store = blob_store
        self.legacy_data_video_id = legacy_data_video_id

    def load_raw(self, video_id: str):
        content = self.blob_store.get(data_key(video_id))
        if content is None and video_id == self.legacy_data_video_id:
            logger.info("No %s yet, reading %s", data_key(video_id), LEGACY_DATA_KEY)
            content = self.blob_store.get(LEGACY_DATA_KEY)
        return self._parse(video_id, content)

    def append(self, video_id: str, snapshot: Snapshot, video_name: str | None, retention_days: int) -> int:
        stored = self.load_raw(video_id)
        cutoff = snapshot.timestamp_ms - retention_days * MS_24H

        if isinstance(stored, dict):
            rows = list(stored.get("snapshots") or [])
            rows.append(snapshot.to_record())
            rows = self._prune(rows, cutoff)
            payload = {**stored, "snapshots": rows}
        else:
            rows = list(stored) if isinstance(stored, list) else []
            rows.append(self._legacy_row(video_id, snapshot, video_name))
            rows = self._prune(rows, cutoff)
            payload = rows

        self.blob_store.set(data_key(video_id), json.dumps(payload, indent=2, ensure_ascii=False))
        return len(rows)

    @staticmethod
    def _parse(video_id: str, content: str | None):
        if not content:
            return []
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning("Stored series for %s is not valid JSON: %s", video_id, exc)
            return []
        if isinstance(parsed, list):
            return parsed
        if isinstance(parsed, dict) and isinstance(parsed.get("snapshots"), list):
            return parsed
        logger.warning("Stored series for %s has unexpected shape %s", video_id, type(parsed).__name__)
        return []

    @staticmethod
    def _legacy_row(video_id: str, snapshot: Snapshot, video_name: str | None) -> dict:
        observed = datetime.fromtimestamp(snapshot.timestamp_ms / 1000, tz=timezone.utc)
        row = {
            "timestamp": snapshot.timestamp_ms,
            "viewCount": snapshot.views_total,
            "date": observed.date().isoformat(),
            "hour": observed.hour,
            "videoId": video_id,
            "videoName": video_name or video_id,
        }
        if snapshot.likes_total is not None:
            row["likeCount"] = snapshot.likes_total
        return row

    @staticmethod
    def _prune(rows: list, cutoff_ms: int) -> list:
        kept = []
        for row in rows:
            ts = _row_timestamp(row)
            if ts is None or ts <= cutoff_ms:
                continue
            kept.append((ts, row))
        kept.sort(key=lambda pair: pair[0])
        return [row for _, row in kept]


def _row_timestamp(row) -> int | None:
    if not isinstance(row, dict):
        return None
    raw = row.get("timestamp") if row.get("timestamp") is not None else row.get("ts")
    ts = normalize_timestamp(raw)
    return None if is_invalid(ts) else ts
