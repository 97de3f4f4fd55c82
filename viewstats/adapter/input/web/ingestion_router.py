from fastapi import APIRouter, Depends

from viewstats.adapter.input.web.dependencies import get_snapshot_ingestion_usecase, to_http_exception
from viewstats.application.usecase.snapshot_ingestion_usecase import SnapshotIngestionUseCase

ingestion_router = APIRouter(tags=["ingestion"])


@ingestion_router.post("/snapshots")
async def ingest_snapshots(usecase: SnapshotIngestionUseCase = Depends(get_snapshot_ingestion_usecase)):
    """
    Manual poll: fetch current statistics for every tracked video and append one snapshot each.
    Per-video failures are reported in the response body.
    """
    try:
        return usecase.ingest_all()
    except RuntimeError as exc:
        raise to_http_exception(exc)

# Manual checks:
# 1) GET  http://localhost:8000/health
# 2) POST http://localhost:8000/ingestion/snapshots
# 3) GET  http://localhost:8000/chart-data?video_id=<VIDEO_ID>&range=24&interval=hourly&stats=true
# 4) GET  http://localhost:8000/quota
