# fantasy_sdk/db/session.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from fantasy_sdk.db.engine import SessionLocal, engine
from fantasy_sdk.db.models import Base


def init_db(bind: Optional[Engine] = None) -> None:
    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def session_scope(factory: Callable[[], Session] = SessionLocal) -> Iterator[Session]:
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
        # read-only requests make this a no-op
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
    finally:
        db.close()
