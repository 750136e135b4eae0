from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings


def _engine_kwargs(url: str) -> dict:
    # SQLite (local dev / tests) has no connection pool sizing and needs
    # cross-thread access for the FastAPI threadpool.
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {"sslmode": "require"} if settings.db_ssl else {},
    }


engine = create_engine(settings.get_db_url(), **_engine_kwargs(settings.get_db_url()))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
