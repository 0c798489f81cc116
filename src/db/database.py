"""Generate database session"""

from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings, get_settings
from src.db.schema import Base


def build_engine(settings: Settings) -> Engine:
    # a session may be used from another thread than the one that opened the SQLite connection
    connect_args = (
        {"check_same_thread": False}
        if settings.database_url.startswith("sqlite")
        else {}
    )
    return create_engine(
        settings.database_url, echo=settings.echo_sql, connect_args=connect_args
    )


engine = build_engine(get_settings())
SessionLocal = sessionmaker(bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=bind)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
