from __future__ import annotations
from typing import List, Optional

from fantasy_sdk.schemas.matchup import Matchup
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_scoreboard


def get_league_matchups(client: YahooClient, league_key: str, week: Optional[int] = None) -> List[Matchup]:
    """This week's (or the given week's) matchups for the league."""
    wk = f";week={int(week)}" if week else ""
    return parse_scoreboard(client.get(f"league/{league_key}/scoreboard{wk}"))
