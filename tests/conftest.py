import os
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# Never reach for a real PostgreSQL server from the test run.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from viewstats.domain.snapshot import Snapshot  # noqa: E402
from viewstats.infrastructure.store.memory_blob_store import InMemoryBlobStore  # noqa: E402

# 2024-01-01T00:00:00Z
FIXED_NOW = 1704067200000
HOUR = 3_600_000


@pytest.fixture()
def now_ms() -> int:
    return FIXED_NOW


@pytest.fixture()
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


def hourly_series(count: int, end_ms: int = FIXED_NOW, start_views: int = 1000, step: int = 100) -> list[Snapshot]:
    """count clean snapshots one hour apart, the last one at end_ms."""
    first = end_ms - (count - 1) * HOUR
    return [Snapshot(first + i * HOUR, start_views + i * step) for i in range(count)]
