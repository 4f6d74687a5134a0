"""Database session management."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from auth_service.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def build_engine(settings: Settings) -> Engine:
    """Create the engine described by ``settings.DATABASE_URL``."""
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session from the application's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
