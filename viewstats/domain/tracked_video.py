import re
from dataclasses import asdict, dataclass
from typing import Optional

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")
DEFAULT_COLOR = "#0070f3"
MAX_NAME_LENGTH = 100


def is_valid_video_id(video_id) -> bool:
    return isinstance(video_id, str) and bool(VIDEO_ID_PATTERN.fullmatch(video_id))


@dataclass
class TrackedVideo:
    id: str
    name: str
    description: Optional[str] = None
    color: str = DEFAULT_COLOR
    start_date: Optional[str] = None

    @classmethod
    def from_config(cls, payload: dict) -> "TrackedVideo":
        name = (payload.get("name") or "").strip()
        return cls(
            id=(payload.get("id") or "").strip(),
            name=name,
            description=(payload.get("description") or "").strip() or f"{name} - YouTube view tracking",
            color=(payload.get("color") or "").strip() or DEFAULT_COLOR,
            start_date=payload.get("startDate") or payload.get("start_date"),
        )

    def to_config(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "startDate": self.start_date,
        }

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_TRACKED_VIDEOS = [
    TrackedVideo(
        id="m2ANkjMRuXc",
        name="純粋とは何か?",
        description="Primary tracked YouTube video",
        color="#0070f3",
        start_date="2024-01-01",
    ),
    TrackedVideo(
        id="NReeTQ3YTAU",
        name="ビリヤニ",
        description="ビリヤニ YouTube video",
        color="#10b981",
        start_date="2024-01-01",
    ),
    TrackedVideo(
        id="bobUT-j6PeQ",
        name="スノウゴースト",
        description="スノウゴースト YouTube video",
        color="#f59e0b",
        start_date="2024-01-01",
    ),
]
