from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from viewstats.adapter.input.web.dependencies import get_chart_query_usecase, to_http_exception
from viewstats.application.usecase.chart_query_usecase import ChartQueryUseCase
from viewstats.domain.errors import VideoNotTrackedError, VideoRegistryError

chart_router = APIRouter(tags=["chart"])


@chart_router.get("")
async def get_chart_data(
    video_id: str = Query(..., description="11-character YouTube video id"),
    range: str = Query(default="all", description="Hours to look back, or 'all'"),
    interval: str | None = Query(default=None, description="hourly | daily"),
    stats: bool = Query(default=False, description="Include the statistics block"),
    limit: str | None = Query(default=None, description="Keep only the last N points"),
    usecase: ChartQueryUseCase = Depends(get_chart_query_usecase),
):
    """
    Time series for one tracked video, optionally with statistics (24h views, peaks, today's growth).
    """
    try:
        result = await usecase.query(video_id, range_hours=range, interval=interval, with_stats=stats, limit=limit)
    except (VideoRegistryError, VideoNotTrackedError, RuntimeError) as exc:
        raise to_http_exception(exc)
    return JSONResponse(jsonable_encoder(result), headers={"Cache-Control": "public, max-age=60"})
