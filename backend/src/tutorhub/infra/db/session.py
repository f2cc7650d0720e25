from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from tutorhub.settings import load_settings

settings = load_settings()

if not settings.database_url:
    raise RuntimeError("DATABASE_URL is required when DB_BACKEND=postgres")

engine = create_engine(settings.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    from tutorhub.infra.db.models import Base

    Base.metadata.create_all(bind=engine)
