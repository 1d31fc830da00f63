# fantasy_sdk/services/cache.py
from __future__ import annotations

import json
import logging
from datetime import timedelta
from typing import Any, Callable, Optional

from pydantic import TypeAdapter
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fantasy_sdk.db.engine import SessionLocal
from fantasy_sdk.db.models import ApiCacheEntry, utcnow
from fantasy_sdk.db.session import session_scope

logger = logging.getLogger(__name__)

# pydantic models, dates etc. -> plain JSON types
_JSONABLE = TypeAdapter(Any)

# TTLs per resource
LEAGUES_TTL = timedelta(hours=24)
TEAMS_TTL = timedelta(hours=6)
ROSTER_TTL = timedelta(hours=1)
SETTINGS_TTL = timedelta(hours=24)


class APICache:
    """
    Key/value cache in the ``yahoo_api_cache`` table.
    Values are stored as JSON text; an expired row is deleted on read and reported as a miss.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[Any]:
        with session_scope(self.session_factory) as db:
            row = db.scalar(select(ApiCacheEntry).where(ApiCacheEntry.cache_key == key))
            if row is None:
                logger.debug("cache MISS %s", key)
                return None
            if row.expires_at <= utcnow():
                logger.debug("cache EXPIRED %s", key)
                db.delete(row)
                return None
            logger.debug("cache HIT %s", key)
            return json.loads(row.cache_value)

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        payload = json.dumps(_JSONABLE.dump_python(value, mode="json"))
        expires_at = utcnow() + ttl
        with session_scope(self.session_factory) as db:
            row = db.scalar(select(ApiCacheEntry).where(ApiCacheEntry.cache_key == key))
            if row is None:
                db.add(ApiCacheEntry(cache_key=key, cache_value=payload, expires_at=expires_at))
            else:
                row.cache_value = payload
                row.expires_at = expires_at
                row.created_at = utcnow()

    def delete(self, key: str) -> None:
        with session_scope(self.session_factory) as db:
            db.execute(delete(ApiCacheEntry).where(ApiCacheEntry.cache_key == key))

    def clean_expired(self) -> int:
        with session_scope(self.session_factory) as db:
            result = db.execute(delete(ApiCacheEntry).where(ApiCacheEntry.expires_at < utcnow()))
            removed = result.rowcount or 0
        if removed:
            logger.info("Removed %d expired cache rows", removed)
        return removed


# ------------- common key helpers -------------

def key_user_leagues(game_key: str) -> str:
    return f"user:leagues:{game_key}"

def key_league_teams(league_key: str) -> str:
    return f"league:{league_key}:teams"

def key_team_roster(team_key: str, date: str | None = None) -> str:
    return f"team:{team_key}:roster" + (f":{date}" if date else "")

def key_league_settings(league_key: str) -> str:
    return f"league:{league_key}:settings"
