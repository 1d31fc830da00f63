from __future__ import annotations

from fantasy_sdk.schemas.team import Standings
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_standings


def get_league_standings(client: YahooClient, league_key: str) -> Standings:
    return parse_standings(client.get(f"league/{league_key}/standings"))
