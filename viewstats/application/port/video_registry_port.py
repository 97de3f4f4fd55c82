from abc import ABC, abstractmethod
from typing import List, Optional

from viewstats.domain.tracked_video import TrackedVideo


class VideoRegistryPort(ABC):

    @abstractmethod
    def load(self, force_refresh: bool = False) -> tuple[List[TrackedVideo], str]:
        """Return the tracked videos and where they came from ("user" or "default")."""
        pass

    @abstractmethod
    def save(self, videos: List[TrackedVideo]) -> None:
        pass

    @abstractmethod
    def find(self, video_id: str) -> Optional[TrackedVideo]:
        pass
