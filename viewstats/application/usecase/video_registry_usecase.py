import logging
from datetime import datetime, timezone
from typing import List

from viewstats.application.port.video_registry_port import VideoRegistryPort
from viewstats.domain.errors import (
    DuplicateVideoError,
    InvalidVideoConfigError,
    InvalidVideoIdError,
    LastVideoError,
    VideoNotFoundError,
)
from viewstats.domain.tracked_video import DEFAULT_COLOR, MAX_NAME_LENGTH, TrackedVideo, is_valid_video_id

logger = logging.getLogger(__name__)


class VideoRegistryUseCase:
    def __init__(self, repository: VideoRegistryPort):
        self.repository = repository

    def list_videos(self, force_refresh: bool = False) -> dict:
        videos, source = self.repository.load(force_refresh=force_refresh)
        return {"videos": [v.to_dict() for v in videos], "source": source}

    def get_video(self, video_id: str) -> TrackedVideo:
        video = self.repository.find(video_id)
        if video is None:
            raise VideoNotFoundError(f"Video {video_id} is not in the tracked list")
        return video

    def is_tracked(self, video_id: str) -> bool:
        return self.repository.find(video_id) is not None

    def add_video(
        self,
        video_id: str,
        name: str,
        description: str | None = None,
        color: str | None = None,
        now: datetime | None = None,
    ) -> TrackedVideo:
        video_id = (video_id or "").strip()
        if not is_valid_video_id(video_id):
            raise InvalidVideoIdError(f"Invalid YouTube video id: {video_id!r}")
        name = self._clean_name(name)

        videos, _ = self.repository.load(force_refresh=True)
        if any(v.id == video_id for v in videos):
            raise DuplicateVideoError(f"Video {video_id} is already tracked")

        today = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date().isoformat()
        video = TrackedVideo(
            id=video_id,
            name=name,
            description=(description or "").strip() or f"{name} - YouTube view tracking",
            color=(color or "").strip() or DEFAULT_COLOR,
            start_date=today,
        )
        self.repository.save(videos + [video])
        logger.info("Added tracked video %s (%s)", video_id, name)
        return video

    def delete_video(self, video_id: str) -> TrackedVideo:
        videos, _ = self.repository.load(force_refresh=True)
        target = next((v for v in videos if v.id == video_id), None)
        if target is None:
            raise VideoNotFoundError(f"Video {video_id} is not in the tracked list")
        if len(videos) <= 1:
            raise LastVideoError("At least one video must stay tracked")

        self.repository.save([v for v in videos if v.id != video_id])
        logger.info("Removed tracked video %s", video_id)
        return target

    def update_video(
        self,
        video_id: str,
        name: str | None = None,
        description: str | None = None,
        color: str | None = None,
    ) -> TrackedVideo:
        videos, _ = self.repository.load(force_refresh=True)
        updated: List[TrackedVideo] = []
        target = None
        for video in videos:
            if video.id == video_id:
                target = TrackedVideo(
                    id=video.id,
                    name=self._clean_name(name) if name is not None else video.name,
                    description=description.strip() if description is not None else video.description,
                    color=(color.strip() or DEFAULT_COLOR) if color is not None else video.color,
                    start_date=video.start_date,
                )
                video = target
            updated.append(video)

        if target is None:
            raise VideoNotFoundError(f"Video {video_id} is not in the tracked list")
        self.repository.save(updated)
        return target

    @staticmethod
    def _clean_name(name: str | None) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidVideoConfigError("Video name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidVideoConfigError(f"Video name must be at most {MAX_NAME_LENGTH} characters")
        return name
