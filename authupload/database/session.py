from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DatabaseSettings
from .models import Base

log = logging.getLogger("authupload.database")


def make_engine(url: str, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        database = make_url(url).database
        if not database or database == ":memory:":
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        else:
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


class Database:
    """Engine + session factory. Safe to share across threads."""

    def __init__(self, url: Optional[str] = None, *, echo: bool = False, settings: Optional[DatabaseSettings] = None):
        cfg = settings or DatabaseSettings()
        self.url = url or cfg.DATABASE_URL
        self.engine = make_engine(self.url, echo=echo or cfg.DATABASE_ECHO)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        log.info("database.init tables=%s", ",".join(sorted(Base.metadata.tables)))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def clean_database(self, environment: str) -> None:
        """Delete every row of every table in one transaction. Test environments only."""
        if environment != "test":
            raise RuntimeError("clean_database can only be used in test environment")
        with self.session_scope() as session:
            for table in reversed(Base.metadata.sorted_tables):
                session.execute(table.delete())

    def dispose(self) -> None:
        self.engine.dispose()
