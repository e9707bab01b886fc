# File: outreach_cms/db/database.py
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from outreach_cms.core.exceptions import ConfigurationError

Base = declarative_base()


def build_engine(database_url: Optional[str], **kwargs) -> Engine:
    if not database_url:
        raise ConfigurationError("Server configuration error", details="DATABASE_URL is not set")
    kwargs.setdefault("pool_pre_ping", True)
    if database_url.startswith("sqlite"):
        kwargs.pop("pool_pre_ping")
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise ConfigurationError("Server configuration error", details="Database is not configured")
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
