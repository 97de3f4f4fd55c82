import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import YouTubeSettings
from viewstats.application.port.last24h_fallback_port import Last24hFallbackPort
from viewstats.domain.video_stats import OfficialViews

logger = logging.getLogger(__name__)

ANALYTICS_SCOPES = ["https://www.googleapis.com/auth/yt-analytics.readonly"]
TRAILING_HOURS = 24


def merge_trailing_hours(yesterday_rows, today_rows, current_hour: int, hours: int = TRAILING_HOURS) -> list[int]:
    """
    Lay yesterday's and today's hourly buckets end to end and keep the `hours` buckets ending at current_hour.
    Rows are [hour, views] pairs; missing hours count as zero.
    """
    buckets = [0] * 48
    for offset, rows in ((0, yesterday_rows), (24, today_rows)):
        for row in rows or []:
            hour, views = int(row[0]), int(row[1] or 0)
            if 0 <= hour < 24:
                buckets[offset + hour] = views
    end = 24 + current_hour + 1
    return buckets[max(0, end - hours):end]


class YouTubeAnalyticsFallback(Last24hFallbackPort):
    """Official trailing-24h views from the YouTube Analytics API, read with a stored OAuth user token."""

    def __init__(self, settings: YouTubeSettings, service=None, clock=None):
        self.settings = settings
        self._service = service
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch_official_last_24h(self, channel_id: str | None, timezone_name: str | None) -> OfficialViews | None:
        return await asyncio.to_thread(self._fetch_sync, channel_id, timezone_name)

    def _fetch_sync(self, channel_id: str | None, timezone_name: str | None) -> OfficialViews | None:
        service = self._get_service()
        if service is None:
            return None

        tz = ZoneInfo(timezone_name or self.settings.analytics_timezone)
        local_now = self._clock().astimezone(tz)
        today = local_now.date()
        yesterday = today - timedelta(days=1)
        ids = f"channel=={channel_id}" if channel_id else "channel==MINE"

        yesterday_rows = self._query_hours(service, ids, yesterday)
        today_rows = self._query_hours(service, ids, today)
        buckets = merge_trailing_hours(yesterday_rows, today_rows, local_now.hour)

        window_end = local_now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        window_start = window_end - timedelta(hours=len(buckets))
        return OfficialViews(
            views_last_24h=sum(buckets),
            window={
                "start": window_start.isoformat(),
                "end": window_end.isoformat(),
                "timezone": str(tz),
                "hours": len(buckets),
            },
        )

    def _query_hours(self, service, ids: str, day: date) -> list:
        try:
            response = (
                service.reports()
                .query(
                    ids=ids,
                    startDate=day.isoformat(),
                    endDate=day.isoformat(),
                    metrics="views",
                    dimensions="hour",
                    sort="hour",
                )
                .execute(num_retries=2)
            )
        except HttpError as exc:
            raise RuntimeError(f"YouTube Analytics reports.query failed for {day}: {exc}") from exc
        return response.get("rows") or []

    def _get_service(self):
        if self._service is not None:
            return self._service
        token_path = self.settings.analytics_token_path
        if not token_path:
            logger.info("YOUTUBE_ANALYTICS_TOKEN_PATH is not set, official 24h views unavailable")
            return None

        credentials = Credentials.from_authorized_user_file(token_path, ANALYTICS_SCOPES)
        if not credentials.valid and credentials.expired and credentials.refresh_token:
            credentials.refresh(Request())
        self._service = build("youtubeAnalytics", "v2", credentials=credentials, cache_discovery=False)
        return self._service
