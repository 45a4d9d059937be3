# frontdesk/db/session.py
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from frontdesk.core.config import settings


def make_engine(db_uri: str) -> Engine:
    kwargs: Dict[str, Any] = {"pool_pre_ping": True, "future": True}
    if db_uri.startswith("sqlite"):
        # one sqlite file shared by request threads; wait on writer locks
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    else:
        kwargs.update(pool_recycle=280, pool_size=10, max_overflow=20)
    return create_engine(db_uri, **kwargs)


def make_sessionmaker(eng: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=eng,
        future=True,
    )


engine: Engine = make_engine(settings.SQLALCHEMY_DATABASE_URI)

SessionLocal = make_sessionmaker(engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
