from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fantasy_sdk.core.config import settings


def make_engine(url: Optional[str] = None) -> Engine:
    url = url or settings.DATABASE_URL

    # Add SSL + TCP keepalive args only for Postgres (not SQLite)
    if url.startswith("postgresql"):
        return create_engine(
            url,
            pool_pre_ping=True,     # automatically tests and replaces stale conns
            pool_recycle=300,       # recycles every 5 min to beat provider idle timeout
            pool_size=10,
            max_overflow=10,
            pool_timeout=10,
            future=True,
            connect_args={
                "sslmode": "require",
                "keepalives": 1,
                "keepalives_idle": 30,
                "keepalives_interval": 10,
                "keepalives_count": 5,
            },
        )

    kwargs = {"future": True, "connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    eng = create_engine(url, **kwargs)

    @event.listens_for(eng, "connect")
    def _sqlite_fk_pragma(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    return eng


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
        expire_on_commit=False,
        future=True,
    )


engine = make_engine()
SessionLocal = make_session_factory(engine)
