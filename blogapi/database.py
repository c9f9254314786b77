"""Database engine and session management"""
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from blogapi.config import Settings
from blogapi.utils.logger import logger

Base = declarative_base()


def create_database_engine(settings: Settings) -> Engine:
    """Create a SQLAlchemy engine for the configured DATABASE_URL"""
    database_url = settings.DATABASE_URL
    # Heroku-style URLs
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    if settings.uses_sqlite:
        engine = create_engine(database_url, connect_args={"check_same_thread": False})
        logger.info("Using SQLite database engine")
    else:
        engine = create_engine(
            database_url,
            pool_pre_ping=True,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_recycle=settings.DATABASE_POOL_RECYCLE,
        )
        logger.info("Using pooled database engine")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_database(engine: Engine) -> None:
    """Create all tables that do not exist yet"""
    # Import models so they register on Base.metadata
    import blogapi.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session from the app's session factory"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
