# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import time
import logging
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

def normalize_db_url(db_url: str) -> str:
    """Hosted Postgres hands out postgres:// URLs; SQLAlchemy needs the psycopg dialect spelled out."""
    if db_url.startswith("postgres://"):
        db_url = "postgresql://" + db_url[len("postgres://"):]
    if db_url.startswith("postgresql://"):
        db_url = "postgresql+psycopg://" + db_url[len("postgresql://"):]
    return db_url

def build_engine(db_url: str, attempts: int | None = None, backoff: float | None = None):
    db_url = normalize_db_url(db_url)
    is_sqlite = db_url.startswith("sqlite")
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False} if is_sqlite else {},
        pool_pre_ping=True,
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

    attempts = attempts or settings.db_connect_attempts
    delay = backoff or settings.db_connect_backoff_seconds
    for attempt in range(1, attempts + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return engine
        except OperationalError as e:
            host = db_url.split("@")[-1]
            if attempt == attempts:
                logger.error(f"Database {host} unreachable after {attempts} attempts")
                raise
            logger.warning(f"Database {host} not reachable (attempt {attempt}/{attempts}), retrying in {delay}s: {e}")
            time.sleep(delay)
            delay *= 2

engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
