from __future__ import annotations

from typing import List, Optional

from pydantic import TypeAdapter

from fantasy_sdk.schemas.team import RosterEntry
from fantasy_sdk.services.cache import ROSTER_TTL, key_team_roster
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_roster

_ROSTER = TypeAdapter(List[RosterEntry])


def get_team_roster(client: YahooClient, team_key: str, date: Optional[str] = None) -> List[RosterEntry]:
    """
    Roster for ``team_key`` (e.g. "454.l.12345.t.3"), today's lineup unless ``date`` (YYYY-MM-DD) is given.
    Entries carry the assigned lineup slot; bench/IL slots have ``is_starting=False``.
    """
    path = f"team/{team_key}/roster" + (f";date={date}" if date else "")

    def fetch() -> List[RosterEntry]:
        return parse_roster(client.get(path))

    return client.cached(key_team_roster(team_key, date), ROSTER_TTL, fetch, _ROSTER.validate_python)
