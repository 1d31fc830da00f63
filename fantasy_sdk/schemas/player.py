from __future__ import annotations
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

class Stat(BaseModel):
    stat_id: int
    value: str = ""      # raw Yahoo value: "12", "0.481", "7/15", "-"

class PlayerName(BaseModel):
    full: str = ""
    first: str = ""
    last: str = ""
    ascii_first: str = ""
    ascii_last: str = ""

class SelectedPosition(BaseModel):
    position: str = ""
    coverage_type: Optional[str] = None
    date: Optional[str] = None
    week: Optional[int] = None
    is_flex_position: bool = False

class PlayerStats(BaseModel):
    coverage_type: str = ""
    week: Optional[int] = None
    date: Optional[str] = None
    season: Optional[int] = None
    stats: List[Stat] = []

class PlayerPoints(BaseModel):
    coverage_type: str = ""
    week: Optional[int] = None
    season: Optional[int] = None
    total: float = 0.0

class Ownership(BaseModel):
    ownership_type: str = ""
    owner_team_key: Optional[str] = None
    owner_team_name: Optional[str] = None

class PercentOwned(BaseModel):
    coverage_type: str = ""
    week: Optional[int] = None
    value: float = 0.0
    delta: Optional[float] = None

class Player(BaseModel):
    player_key: str
    player_id: str = ""
    name: PlayerName = Field(default_factory=PlayerName)
    editorial_team_key: str = ""
    editorial_team_full_name: str = ""
    editorial_team_abbr: str = ""
    display_position: str = ""
    eligible_positions: List[str] = []
    selected_position: Optional[SelectedPosition] = None
    player_stats: Optional[PlayerStats] = None
    player_points: Optional[PlayerPoints] = None
    ownership: Optional[Ownership] = None
    percent_owned: Optional[PercentOwned] = None
    status: Optional[str] = None
    status_full: Optional[str] = None
    injury_note: Optional[str] = None
    uniform_number: Optional[str] = None
    image_url: Optional[str] = None
    headshot: Dict[str, str] = {}
