from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from config.database.session import Base


class BlobORM(Base):
    __tablename__ = "blob"

    key = Column(String(255), primary_key=True)
    content = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
