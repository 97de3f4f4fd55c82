import os
import urllib.parse

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()


def _database_url() -> str:
    # DATABASE_URL wins; otherwise compose a PostgreSQL URL from the SQL_* parts.
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    password = urllib.parse.quote_plus(os.getenv("SQL_PASSWORD", ""))
    return (
        f"postgresql+psycopg2://{os.getenv('SQL_USER','postgres')}:{password}"
        f"@{os.getenv('SQL_HOST','localhost')}:{os.getenv('SQL_PORT','5432')}/{os.getenv('SQL_DATABASE','view_tracker')}"
    )


DATABASE_URL = _database_url()

engine = create_engine(
    DATABASE_URL,
    echo=os.getenv("SQL_ECHO", "false").lower() == "true",
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db_schema(bind=None):
    """
    Create the blob table on startup when the SQL backend is selected.
    """
    Base.metadata.create_all(bind=bind or engine)
