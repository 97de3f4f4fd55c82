import asyncio
import logging

from config.logging_config import configure_logging
from config.settings import BatchSettings
from viewstats.adapter.input.web.dependencies import get_snapshot_ingestion_usecase

logger = logging.getLogger(__name__)


async def run_snapshot_batch_once() -> dict:
    """
    Poll every tracked video once. The Data API client is blocking, so it runs in a worker thread.
    """
    usecase = get_snapshot_ingestion_usecase()
    result = await asyncio.to_thread(usecase.ingest_all)
    summary = result["summary"]
    logger.info(
        "[SNAPSHOT-BATCH] done: %d/%d videos, %d total views",
        summary["successful"],
        summary["total_videos"],
        summary["total_views"],
    )
    return result


async def start_snapshot_scheduler(settings: BatchSettings | None = None):
    """
    - ENABLE_SNAPSHOT_BATCH=true turns the loop on.
    - BATCH_SNAPSHOT_INTERVAL_MINUTES (default 60) sets the pause between polls.
    """
    settings = settings or BatchSettings()
    if not settings.enabled:
        return

    try:
        while True:
            try:
                logger.info("[SNAPSHOT-BATCH] run started")
                await run_snapshot_batch_once()
            except Exception as exc:
                # One failed poll must not stop the scheduler.
                logger.exception("[SNAPSHOT-BATCH] failed: %s", exc)
            await asyncio.sleep(settings.interval_minutes * 60)
    except asyncio.CancelledError:
        logger.info("[SNAPSHOT-BATCH] scheduler stopped")
        raise


if __name__ == "__main__":
    configure_logging()
    asyncio.run(run_snapshot_batch_once())
