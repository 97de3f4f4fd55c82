from abc import ABC, abstractmethod
from typing import Iterable

from viewstats.domain.video_stats import VideoStats


class VideoStatsClientPort(ABC):
    platform: str

    @abstractmethod
    def fetch_current_stats(self, video_id: str) -> VideoStats:
        raise NotImplementedError

    @abstractmethod
    def fetch_many(self, video_ids: list[str]) -> Iterable[VideoStats]:
        raise NotImplementedError
