from abc import ABC, abstractmethod

from viewstats.domain.video_stats import OfficialViews


class Last24hFallbackPort(ABC):
    @abstractmethod
    async def fetch_official_last_24h(self, channel_id: str | None, timezone: str | None) -> OfficialViews | None:
        """Return the official trailing-24h views or None when unavailable. May raise; callers must not rely on it."""
        raise NotImplementedError
