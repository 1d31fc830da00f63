from __future__ import annotations

import logging
from typing import List

from pydantic import TypeAdapter

from fantasy_sdk.schemas.league import League, StatCategory
from fantasy_sdk.schemas.team import Team
from fantasy_sdk.services.cache import (
    LEAGUES_TTL,
    SETTINGS_TTL,
    TEAMS_TTL,
    key_league_settings,
    key_league_teams,
    key_user_leagues,
)
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_leagues, parse_stat_categories, parse_teams

logger = logging.getLogger(__name__)

_LEAGUES = TypeAdapter(List[League])
_TEAMS = TypeAdapter(List[Team])
_CATEGORIES = TypeAdapter(List[StatCategory])


def get_user_leagues(client: YahooClient, game_key: str) -> List[League]:
    """Leagues the logged-in user belongs to for one game (``nba`` or a numeric key like ``454``)."""
    def fetch() -> List[League]:
        payload = client.get(f"users;use_login=1/games;game_keys={game_key}/leagues")
        leagues = parse_leagues(payload, game_key=game_key)
        logger.debug("Fetched %d leagues for game %s", len(leagues), game_key)
        return leagues

    return client.cached(key_user_leagues(game_key), LEAGUES_TTL, fetch, _LEAGUES.validate_python)


def get_league_teams(client: YahooClient, league_key: str) -> List[Team]:
    def fetch() -> List[Team]:
        return parse_teams(client.get(f"league/{league_key}/teams"))

    return client.cached(key_league_teams(league_key), TEAMS_TTL, fetch, _TEAMS.validate_python)


def get_stat_categories(client: YahooClient, league_key: str) -> List[StatCategory]:
    def fetch() -> List[StatCategory]:
        return parse_stat_categories(client.get(f"league/{league_key}/settings"))

    return client.cached(key_league_settings(league_key), SETTINGS_TTL, fetch, _CATEGORIES.validate_python)
