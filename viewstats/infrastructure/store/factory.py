import logging

from config.settings import StorageSettings
from viewstats.application.port.blob_store_port import BlobStorePort
from viewstats.infrastructure.store.memory_blob_store import InMemoryBlobStore

logger = logging.getLogger(__name__)


def build_blob_store(settings: StorageSettings) -> BlobStorePort:
    """
    Pick the backend named by BLOB_STORE_BACKEND. Backend modules are imported lazily
    so a memory-only deployment never touches boto3 or the database engine.
    """
    backend = settings.backend
    if backend == "s3":
        from viewstats.infrastructure.store.s3_blob_store import S3BlobStore

        return S3BlobStore(prefix=settings.prefix)
    if backend == "sql":
        from config.database.session import init_db_schema
        from viewstats.infrastructure.store.sql_blob_store import SqlBlobStore

        init_db_schema()
        return SqlBlobStore(prefix=settings.prefix)
    if backend != "memory":
        logger.warning("Unknown BLOB_STORE_BACKEND=%r, using in-memory store", backend)
    return InMemoryBlobStore()
