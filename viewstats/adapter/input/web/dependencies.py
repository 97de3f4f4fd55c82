from fastapi import HTTPException

from config.settings import StorageSettings, YouTubeSettings
from viewstats.application.port.blob_store_port import BlobStorePort
from viewstats.application.usecase.chart_query_usecase import ChartQueryUseCase
from viewstats.application.usecase.quota_usecase import QuotaUseCase
from viewstats.application.usecase.snapshot_ingestion_usecase import SnapshotIngestionUseCase
from viewstats.application.usecase.statistics_usecase import StatisticsUseCase
from viewstats.application.usecase.video_registry_usecase import VideoRegistryUseCase
from viewstats.domain.errors import (
    DuplicateVideoError,
    VideoNotFoundError,
    VideoNotTrackedError,
    VideoRegistryError,
)
from viewstats.infrastructure.repository.quota_repository_impl import QuotaRepositoryImpl
from viewstats.infrastructure.repository.snapshot_repository_impl import SnapshotRepositoryImpl
from viewstats.infrastructure.repository.video_registry_repository_impl import VideoRegistryRepositoryImpl
from viewstats.infrastructure.store.factory import build_blob_store

# Process-wide singletons, created on first use so env vars set after import still apply.
_blob_store: BlobStorePort | None = None
_registry_repository: VideoRegistryRepositoryImpl | None = None
_quota_usecase: QuotaUseCase | None = None
_statistics_usecase: StatisticsUseCase | None = None


def get_blob_store() -> BlobStorePort:
    global _blob_store
    if _blob_store is None:
        _blob_store = build_blob_store(StorageSettings())
    return _blob_store


def get_registry_repository() -> VideoRegistryRepositoryImpl:
    global _registry_repository
    if _registry_repository is None:
        _registry_repository = VideoRegistryRepositoryImpl(get_blob_store())
    return _registry_repository


def get_snapshot_repository() -> SnapshotRepositoryImpl:
    return SnapshotRepositoryImpl(get_blob_store(), StorageSettings().legacy_data_video_id)


def get_video_registry_usecase() -> VideoRegistryUseCase:
    return VideoRegistryUseCase(get_registry_repository())


def get_quota_usecase() -> QuotaUseCase:
    global _quota_usecase
    if _quota_usecase is None:
        _quota_usecase = QuotaUseCase(QuotaRepositoryImpl(get_blob_store()))
    return _quota_usecase


def get_statistics_usecase() -> StatisticsUseCase:
    """The Analytics fallback is only wired when an OAuth token file is configured."""
    global _statistics_usecase
    if _statistics_usecase is not None:
        return _statistics_usecase
    settings = YouTubeSettings()
    fallback = None
    if settings.analytics_token_path:
        from viewstats.infrastructure.client.youtube_analytics_client import YouTubeAnalyticsFallback

        fallback = YouTubeAnalyticsFallback(settings)
    _statistics_usecase = StatisticsUseCase(
        fallback=fallback,
        channel_id=settings.channel_id,
        timezone=settings.analytics_timezone,
        fallback_timeout_seconds=settings.analytics_timeout_seconds,
    )
    return _statistics_usecase


def get_chart_query_usecase() -> ChartQueryUseCase:
    return ChartQueryUseCase(get_registry_repository(), get_snapshot_repository(), get_statistics_usecase())


def get_snapshot_ingestion_usecase() -> SnapshotIngestionUseCase:
    settings = YouTubeSettings()
    if not settings.api_key:
        raise HTTPException(
            status_code=500,
            detail={"code": "MISSING_CONFIG", "message": "YOUTUBE_API_KEY is not configured"},
        )
    from viewstats.infrastructure.client.youtube_client import YouTubeStatsClient

    return SnapshotIngestionUseCase(
        YouTubeStatsClient(settings),
        get_registry_repository(),
        get_snapshot_repository(),
        quota=get_quota_usecase(),
        retention_days=StorageSettings().retention_days,
    )


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, DuplicateVideoError):
        status = 409
    elif isinstance(exc, VideoNotFoundError):
        status = 404
    elif isinstance(exc, (VideoRegistryError, VideoNotTrackedError)):
        status = 400
    else:
        return HTTPException(status_code=500, detail={"code": "INTERNAL_ERROR", "message": str(exc)})
    return HTTPException(status_code=status, detail={"code": exc.code, "message": str(exc)})
