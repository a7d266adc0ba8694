"""
Database access (SQLAlchemy)

This module centralizes database access:
- Engine and session factory
- Declarative Base for ORM models
- FastAPI dependency for request-scoped sessions
- Connectivity check with retry (used by startup and /health)

SQLite is the default backend; PostgreSQL works through the `postgres`
extra (psycopg2) by setting DATABASE_URL.
"""
import logging
import time

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str):
    """
    Create a SQLAlchemy engine for the given URL

    SQLite needs check_same_thread disabled because FastAPI runs sync
    endpoints in a threadpool; pool sizing only applies to server databases.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connection before use
        pool_size=10,
        max_overflow=20,
    )


engine = build_engine(settings.DATABASE_URL)

# Session Factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base for models
Base = declarative_base()


def get_db():
    """
    FastAPI dependency that yields a SQLAlchemy session

    Usage:
        @router.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables registered on Base"""
    # Import models so they register on Base.metadata
    from desiconnect import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def check_connection_with_retry(max_retries=3, retry_delay=1.0, bind=None) -> float:
    """
    Run `SELECT 1` against the database, retrying on connection failures

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)
        bind: Engine to check (defaults to the application engine)

    Returns:
        Query latency in milliseconds

    Raises:
        sqlalchemy.exc.OperationalError: If all retry attempts fail
    """
    target = bind or engine
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            start = time.time()
            with target.connect() as conn:
                conn.execute(text("SELECT 1"))
            return round((time.time() - start) * 1000, 2)

        except OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error
