from dataclasses import dataclass
from typing import Optional


@dataclass
class VideoStats:
    """Current public counters of one video as reported by the Data API."""
    video_id: str
    view_count: int
    like_count: Optional[int] = None


@dataclass
class OfficialViews:
    """Authoritative trailing-24h view count from the Analytics API plus a description of the window it covers."""
    views_last_24h: int
    window: dict
