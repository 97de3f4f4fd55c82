from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from config.database.session import SessionLocal
from viewstats.application.port.blob_store_port import BlobStorePort
from viewstats.infrastructure.orm.models import BlobORM


class SqlBlobStore(BlobStorePort):
    def __init__(self, session_factory=SessionLocal, prefix: str = ""):
        self.session_factory = session_factory
        self.prefix = prefix

    def get(self, key: str) -> str | None:
        try:
            with self.session_factory() as db:
                orm = db.get(BlobORM, self._key(key))
                return orm.content if orm is not None else None
        except SQLAlchemyError as exc:
            raise RuntimeError(f"SQL blob read failed ({key}): {exc}") from exc

    def set(self, key: str, content: str) -> None:
        try:
            with self.session_factory() as db:
                orm = db.get(BlobORM, self._key(key))
                if orm is None:
                    orm = BlobORM(key=self._key(key))
                    db.add(orm)
                orm.content = content
                orm.updated_at = datetime.utcnow()
                db.commit()
        except SQLAlchemyError as exc:
            raise RuntimeError(f"SQL blob write failed ({key}): {exc}") from exc

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key
