import logging
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from viewstats.application.port.quota_repository_port import QuotaRepositoryPort
from viewstats.infrastructure.cache import TtlCache

logger = logging.getLogger(__name__)

QUOTA_LIMIT = 10000
QUOTA_TIMEZONE = ZoneInfo("America/Los_Angeles")

API_COSTS = {
    "videos.list": 1,
    "search.list": 100,
    "channels.list": 1,
    "playlistItems.list": 1,
    "playlists.list": 1,
    "comments.list": 1,
    "commentThreads.list": 1,
}

_CACHE_KEY = "quota"


def get_api_cost(endpoint: str) -> int:
    return API_COSTS.get(endpoint, 1)


def quota_date(now: datetime) -> str:
    """YouTube quota days roll over at midnight Pacific time."""
    return now.astimezone(QUOTA_TIMEZONE).date().isoformat()


def time_until_reset(now: datetime) -> dict:
    local_now = now.astimezone(QUOTA_TIMEZONE)
    next_midnight = datetime.combine(
        local_now.date() + timedelta(days=1), datetime.min.time(), tzinfo=QUOTA_TIMEZONE
    )
    total_ms = int((next_midnight - local_now) / timedelta(milliseconds=1))
    return {
        "reset_at": next_midnight.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
        "hours": total_ms // 3_600_000,
        "minutes": (total_ms % 3_600_000) // 60_000,
        "total_ms": total_ms,
    }


class QuotaUseCase:
    def __init__(self, repository: QuotaRepositoryPort, cache: TtlCache | None = None, limit: int = QUOTA_LIMIT):
        self.repository = repository
        self.cache = cache or TtlCache()
        self.limit = limit

    def track_usage(self, endpoint: str, now: datetime | None = None, cost: int | None = None) -> dict:
        now = now or datetime.now(timezone.utc)
        cost = cost if cost is not None else get_api_cost(endpoint)
        today = quota_date(now)

        quota = self._load()
        if not quota or quota.get("date") != today:
            quota = {"date": today, "usage": 0, "calls": []}

        quota["usage"] = int(quota.get("usage") or 0) + cost
        quota.setdefault("calls", []).append(
            {
                "timestamp": now.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
                "endpoint": endpoint,
                "cost": cost,
            }
        )
        self.cache.set(_CACHE_KEY, quota)

        try:
            self.repository.save(quota)
        except RuntimeError as exc:
            logger.warning("Could not persist quota usage, keeping it in memory: %s", exc)
        return quota

    def get_status(self, now: datetime | None = None) -> dict:
        now = now or datetime.now(timezone.utc)
        today = quota_date(now)

        quota = self.cache.get(_CACHE_KEY)
        if not quota or quota.get("date") != today:
            quota = self._load()
            if quota and quota.get("date") == today:
                self.cache.set(_CACHE_KEY, quota)
            else:
                quota = {"date": today, "usage": 0, "calls": []}

        usage = int(quota.get("usage") or 0)
        reset = time_until_reset(now)
        return {
            "date": today,
            "usage": usage,
            "limit": self.limit,
            "remaining": self.limit - usage,
            "percentage": round(usage / self.limit * 100, 2),
            "calls": list(quota.get("calls") or []),
            "reset_at": reset["reset_at"],
            "reset_in": {"hours": reset["hours"], "minutes": reset["minutes"], "total_ms": reset["total_ms"]},
        }

    def _load(self) -> dict | None:
        try:
            return self.repository.load()
        except RuntimeError as exc:
            logger.warning("Could not read stored quota: %s", exc)
            return None
