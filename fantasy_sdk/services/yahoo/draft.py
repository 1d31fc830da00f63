from __future__ import annotations

from typing import List

from fantasy_sdk.schemas.league import DraftResult
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_draft_results


def get_league_draft_results(client: YahooClient, league_key: str) -> List[DraftResult]:
    return parse_draft_results(client.get(f"league/{league_key}/draftresults"))


def get_team_draft_results(client: YahooClient, team_key: str) -> List[DraftResult]:
    return parse_draft_results(client.get(f"team/{team_key}/draftresults"))
