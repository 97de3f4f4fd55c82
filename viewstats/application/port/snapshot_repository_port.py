from abc import ABC, abstractmethod

from viewstats.domain.snapshot import Snapshot


class SnapshotRepositoryPort(ABC):
    @abstractmethod
    def load_raw(self, video_id: str):
        """Stored series exactly as persisted (list or {"snapshots": [...]}); [] when absent or unreadable."""
        raise NotImplementedError

    @abstractmethod
    def append(self, video_id: str, snapshot: Snapshot, video_name: str | None, retention_days: int) -> int:
        """Append one observation, prune rows older than the retention window and return the stored row count."""
        raise NotImplementedError
