from __future__ import annotations

from typing import List

from fantasy_sdk.schemas.transaction import Transaction
from fantasy_sdk.services.yahoo.client import YahooClient
from fantasy_sdk.services.yahoo.parsers import parse_transactions


def get_league_transactions(client: YahooClient, league_key: str) -> List[Transaction]:
    """Adds, drops and trades, newest first as Yahoo returns them."""
    return parse_transactions(client.get(f"league/{league_key}/transactions"))
