import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass
class YouTubeSettings:
    api_key: str = field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY", ""))
    quota_user: str | None = field(default_factory=lambda: os.getenv("YOUTUBE_QUOTA_USER"))
    channel_id: str | None = field(default_factory=lambda: os.getenv("YOUTUBE_CHANNEL_ID"))
    analytics_token_path: str | None = field(default_factory=lambda: os.getenv("YOUTUBE_ANALYTICS_TOKEN_PATH"))
    analytics_timezone: str = field(
        default_factory=lambda: os.getenv("YOUTUBE_ANALYTICS_TIMEZONE", "Asia/Hong_Kong")
    )
    analytics_timeout_seconds: float = field(
        default_factory=lambda: _env_float("YOUTUBE_ANALYTICS_TIMEOUT_SECONDS", 10.0)
    )


@dataclass
class StorageSettings:
    backend: str = field(default_factory=lambda: os.getenv("BLOB_STORE_BACKEND", "memory").lower())
    prefix: str = field(default_factory=lambda: os.getenv("BLOB_STORE_PREFIX", ""))
    legacy_data_video_id: str | None = field(default_factory=lambda: os.getenv("LEGACY_DATA_VIDEO_ID"))
    retention_days: int = field(default_factory=lambda: _env_int("SNAPSHOT_RETENTION_DAYS", 30))


@dataclass
class BatchSettings:
    enabled: bool = field(
        default_factory=lambda: os.getenv("ENABLE_SNAPSHOT_BATCH", "false").lower() == "true"
    )
    interval_minutes: int = field(default_factory=lambda: _env_int("BATCH_SNAPSHOT_INTERVAL_MINUTES", 60))
