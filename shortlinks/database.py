import logging
import os
import threading
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Explicitly load .env from project root (parent of shortlinks/)
ENV_PATH = Path(__file__).parent.parent / ".env"
load_dotenv(ENV_PATH)

logger = logging.getLogger("shortlinks.database")

SessionLocal = sessionmaker(autocommit=False, autoflush=False)
Base = declarative_base()

_engine: Engine | None = None
_initialized = False
_lock = threading.Lock()


def database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be set")
    # Hosted Postgres providers still hand out the old scheme
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},  # needed for SQLite + FastAPI
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        with _lock:
            if _engine is None:
                _engine = _create_engine(database_url())
                SessionLocal.configure(bind=_engine)
    return _engine


def init_db() -> None:
    """Create the links table once per process.

    Concurrent callers wait on the lock and then see the finished state.
    A failed attempt is not remembered, so the next call tries again.
    """
    global _initialized
    if _initialized:
        return
    engine = get_engine()
    with _lock:
        if _initialized:
            return
        from shortlinks import models  # noqa: F401  registers the table on Base

        Base.metadata.create_all(bind=engine)
        _initialized = True
        logger.info("Database initialized (%s)", engine.url.get_backend_name())


def dispose() -> None:
    global _engine, _initialized
    with _lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _initialized = False


def get_db():
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
