import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> str:
    """Hosted PostgreSQL often hands out postgres://, SQLAlchemy needs postgresql://"""
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql://", 1)
    return database_url


def build_connect_args(database_url: str, timeout_seconds: float) -> dict:
    """
    Driver arguments that bound every store call.

    SQLite: busy timeout (seconds) while waiting for the write lock.
    PostgreSQL: statement_timeout and lock_timeout (milliseconds).
    """
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout_seconds}
    if database_url.startswith("postgresql"):
        timeout_ms = int(timeout_seconds * 1000)
        return {
            "options": f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}"
        }
    return {}


database_url = normalize_database_url(settings.database_url)

engine = create_engine(
    database_url,
    connect_args=build_connect_args(database_url, settings.store_timeout_seconds),
    echo=False,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all tables in the database"""
    from . import models  # noqa: F401  registers models on Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready on {database_url.split('://')[0]}")
