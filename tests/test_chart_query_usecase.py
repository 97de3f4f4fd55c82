import asyncio
import json

import pytest

from conftest import FIXED_NOW, HOUR
from viewstats.application.usecase.chart_query_usecase import ChartQueryUseCase, parse_limit
from viewstats.domain.errors import InvalidVideoIdError, VideoNotTrackedError
from viewstats.domain.tracked_video import DEFAULT_TRACKED_VIDEOS
from viewstats.infrastructure.repository.snapshot_repository_impl import SnapshotRepositoryImpl, data_key
from viewstats.infrastructure.repository.video_registry_repository_impl import VideoRegistryRepositoryImpl

VIDEO = DEFAULT_TRACKED_VIDEOS[0]


@pytest.fixture()
def usecase(blob_store):
    rows = [{"timestamp": FIXED_NOW - i * HOUR, "viewCount": 5000 - i * 100} for i in range(30)]
    rows.append({"timestamp": "garbage", "viewCount": 1})
    blob_store.set(data_key(VIDEO.id), json.dumps(rows))
    return ChartQueryUseCase(VideoRegistryRepositoryImpl(blob_store), SnapshotRepositoryImpl(blob_store))


def test_query_returns_sorted_data_and_meta(usecase):
    result = asyncio.run(usecase.query(VIDEO.id, now_ms=FIXED_NOW))

    assert len(result["data"]) == 30
    assert result["data"][0]["timestamp"] < result["data"][-1]["timestamp"]
    assert result["video_info"]["name"] == VIDEO.name
    assert result["meta"]["stored_count"] == 30
    assert result["meta"]["dropped_records"] == 1
    assert result["meta"]["request_id"].startswith("api_")
    assert result["statistics"] is None


def test_query_range_limit_and_stats(usecase):
    result = asyncio.run(usecase.query(VIDEO.id, range_hours="6", limit="3", with_stats=True, now_ms=FIXED_NOW))

    assert [p["view_count"] for p in result["data"]] == [4800, 4900, 5000]
    stats = result["statistics"]
    # 24h figure comes from the full stored series, not the filtered points
    assert stats["views_last_24h"]["value"] == 2400
    assert stats["views_last_24h"]["source"] == "local"
    assert stats["summary"]["filtered_records"] == 3
    assert stats["summary"]["total_records"] == 30


def test_query_hourly_interval(usecase):
    result = asyncio.run(usecase.query(VIDEO.id, interval="hourly", now_ms=FIXED_NOW))

    assert result["meta"]["returned_count"] == 30


def test_query_validates_video(usecase):
    with pytest.raises(InvalidVideoIdError):
        asyncio.run(usecase.query("bad", now_ms=FIXED_NOW))
    with pytest.raises(VideoNotTrackedError):
        asyncio.run(usecase.query("dQw4w9WgXcQ", now_ms=FIXED_NOW))


def test_parse_limit():
    assert parse_limit("5") == 5
    assert parse_limit(None) is None
    assert parse_limit("0") is None
    assert parse_limit("x") is None
