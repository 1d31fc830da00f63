from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

from fantasy_sdk.schemas.player import PlayerName

class TransactionData(BaseModel):
    type: str = ""                      # add / drop / trade
    source_type: str = ""               # freeagents / waivers / team
    source_team_key: Optional[str] = None
    source_team_name: Optional[str] = None
    destination_type: str = ""
    destination_team_key: Optional[str] = None
    destination_team_name: Optional[str] = None

class TransactionPlayer(BaseModel):
    player_key: str
    player_id: str = ""
    name: PlayerName = Field(default_factory=PlayerName)
    transaction_data: TransactionData = Field(default_factory=TransactionData)

class Transaction(BaseModel):
    transaction_key: str
    transaction_id: str = ""
    type: str = ""
    status: str = ""
    timestamp: int = 0
    faab_bid: Optional[int] = None
    players: List[TransactionPlayer] = []
