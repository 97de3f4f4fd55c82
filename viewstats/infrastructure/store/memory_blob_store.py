from viewstats.application.port.blob_store_port import BlobStorePort


class InMemoryBlobStore(BlobStorePort):
    """Process-local store for development and tests; contents vanish on restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.blobs.get(key)

    def set(self, key: str, content: str) -> None:
        self.blobs[key] = content
