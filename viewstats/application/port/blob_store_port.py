from abc import ABC, abstractmethod


class BlobStorePort(ABC):
    """Named text blobs with last-writer-wins get/set. No transactions."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, content: str) -> None:
        raise NotImplementedError
