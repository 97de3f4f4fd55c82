import os
import asyncio
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.batch.snapshot_batch import start_snapshot_scheduler
from config.logging_config import configure_logging
from viewstats.adapter.input.web.chart_router import chart_router
from viewstats.adapter.input.web.ingestion_router import ingestion_router
from viewstats.adapter.input.web.quota_router import quota_router
from viewstats.adapter.input.web.video_router import video_router

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure logging and run the periodic snapshot poll for the lifetime of the app.
    """
    configure_logging()
    app.state.snapshot_task = asyncio.create_task(start_snapshot_scheduler())
    try:
        yield
    finally:
        task = getattr(app.state, "snapshot_task", None)
        if task:
            task.cancel()


app = FastAPI(title="YouTube View Tracker", version="0.1.0", lifespan=lifespan)

origins_env = os.getenv("CORS_ORIGINS")
origins = [origin for origin in origins_env.split(",") if origin] if origins_env else ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chart_router, prefix="/chart-data")
app.include_router(video_router, prefix="/videos")
app.include_router(ingestion_router, prefix="/ingestion")
app.include_router(quota_router, prefix="/quota")


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
