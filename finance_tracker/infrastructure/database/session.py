"""Database engine and per-request sessions"""

from typing import Any, Dict, Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pooling for PostgreSQL; SQLite (local runs) only needs cross-thread access"""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """One session per request; routers commit or roll back explicitly"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
