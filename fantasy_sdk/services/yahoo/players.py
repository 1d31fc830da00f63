from __future__ import annotations

from typing import List, Optional

from fantasy_sdk.schemas.player import Player
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_players

# Yahoo player status filters
STATUS_ALL = "A"
STATUS_FREE_AGENT = "FA"
STATUS_WAIVERS = "W"
STATUS_TAKEN = "T"
STATUS_KEEPERS = "K"
PLAYER_STATUSES = (STATUS_ALL, STATUS_FREE_AGENT, STATUS_WAIVERS, STATUS_TAKEN, STATUS_KEEPERS)


def get_league_players(
    client: YahooClient,
    league_key: str,
    status: str = STATUS_ALL,
    start: int = 0,
    count: int = 25,
) -> List[Player]:
    status = (status or STATUS_ALL).upper()
    if status not in PLAYER_STATUSES:
        raise ValueError(f"Unknown player status {status!r}; expected one of {', '.join(PLAYER_STATUSES)}")
    if start < 0 or count < 1:
        raise ValueError("start must be >= 0 and count >= 1")
    path = f"league/{league_key}/players;status={status};start={int(start)};count={int(count)}"
    return parse_players(client.get(path))


def get_player_stats(
    client: YahooClient,
    league_key: str,
    player_key: str,
    week: Optional[int] = None,
) -> Optional[Player]:
    """League-scoped stats for one player: season totals, or one week when ``week`` is set."""
    tail = f";type=week;week={int(week)}" if week else ""
    players = parse_players(client.get(f"league/{league_key}/players;player_keys={player_key}/stats{tail}"))
    return players[0] if players else None
