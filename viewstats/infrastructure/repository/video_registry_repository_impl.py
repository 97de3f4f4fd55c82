import json
import logging
from typing import List, Optional

from viewstats.application.port.blob_store_port import BlobStorePort
from viewstats.application.port.video_registry_port import VideoRegistryPort
from viewstats.domain.errors import InvalidVideoConfigError
from viewstats.domain.tracked_video import (
    DEFAULT_TRACKED_VIDEOS,
    MAX_NAME_LENGTH,
    TrackedVideo,
    is_valid_video_id,
)
from viewstats.infrastructure.cache import TtlCache

logger = logging.getLogger(__name__)

CONFIG_KEY = "youtube-videos-config.json"
SOURCE_USER = "user"
SOURCE_DEFAULT = "default"


def validate_video_config(entries) -> None:
    if not isinstance(entries, list):
        raise InvalidVideoConfigError("video config must be a list")
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise InvalidVideoConfigError(f"video #{index} is not an object")
        if not is_valid_video_id(entry.get("id")):
            raise InvalidVideoConfigError(f"video #{index} has an invalid id: {entry.get('id')!r}")
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InvalidVideoConfigError(f"video #{index} is missing a name")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidVideoConfigError(f"video #{index} name is longer than {MAX_NAME_LENGTH} characters")


class VideoRegistryRepositoryImpl(VideoRegistryPort):
    def __init__(self, blob_store: BlobStorePort, cache: TtlCache | None = None):
        self.blob_store = blob_store
        self.cache = cache or TtlCache()

    def load(self, force_refresh: bool = False) -> tuple[List[TrackedVideo], str]:
        if not force_refresh:
            cached = self.cache.get(CONFIG_KEY)
            if cached is not None:
                return list(cached[0]), cached[1]

        videos, source = self._read()
        self.cache.set(CONFIG_KEY, (videos, source))
        return list(videos), source

    def save(self, videos: List[TrackedVideo]) -> None:
        entries = [v.to_config() for v in videos]
        validate_video_config(entries)
        self.blob_store.set(CONFIG_KEY, json.dumps(entries, indent=2, ensure_ascii=False))
        self.cache.invalidate(CONFIG_KEY)
        logger.info("Saved video config with %d videos", len(videos))

    def find(self, video_id: str) -> Optional[TrackedVideo]:
        videos, _ = self.load()
        return next((v for v in videos if v.id == video_id), None)

    def _read(self) -> tuple[List[TrackedVideo], str]:
        content = self.blob_store.get(CONFIG_KEY)
        if not content:
            return list(DEFAULT_TRACKED_VIDEOS), SOURCE_DEFAULT
        try:
            entries = json.loads(content)
            validate_video_config(entries)
        except (json.JSONDecodeError, InvalidVideoConfigError) as exc:
            logger.warning("Ignoring stored video config: %s", exc)
            return list(DEFAULT_TRACKED_VIDEOS), SOURCE_DEFAULT
        if not entries:
            return list(DEFAULT_TRACKED_VIDEOS), SOURCE_DEFAULT
        return [TrackedVideo.from_config(e) for e in entries], SOURCE_USER
