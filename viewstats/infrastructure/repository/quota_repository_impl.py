import json
import logging

from viewstats.application.port.blob_store_port import BlobStorePort
from viewstats.application.port.quota_repository_port import QuotaRepositoryPort

logger = logging.getLogger(__name__)

QUOTA_KEY = "youtube-quota.json"


class QuotaRepositoryImpl(QuotaRepositoryPort):
    def __init__(self, blob_store: BlobStorePort):
        self.blob_store = blob_store

    def load(self) -> dict | None:
        content = self.blob_store.get(QUOTA_KEY)
        if not content:
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning("Stored quota is not valid JSON: %s", exc)
            return None
        return data if isinstance(data, dict) else None

    def save(self, quota: dict) -> None:
        self.blob_store.set(QUOTA_KEY, json.dumps(quota, indent=2))
