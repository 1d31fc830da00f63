from __future__ import annotations

import pytest
from cryptography.fernet import Fernet

from fantasy_sdk.core import crypto
from fantasy_sdk.core.config import settings
from fantasy_sdk.db.engine import make_engine, make_session_factory
from fantasy_sdk.db.session import init_db


# ---------------- database ----------------

@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture
def encryption_key(monkeypatch):
    monkeypatch.setattr(settings, "ENCRYPTION_KEY", Fernet.generate_key().decode())
    crypto._fernet.cache_clear()
    yield
    crypto._fernet.cache_clear()
