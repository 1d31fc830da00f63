from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class League(BaseModel):
    yahoo_league_id: str                # numeric league id, e.g. "12345"
    yahoo_game_key: str                 # e.g. "454"
    league_key: str = ""                # "{game_key}.l.{league_id}"
    league_name: str
    season_year: int = 0
    scoring_type: str = ""
    num_teams: int = 0
    current_week: int = 0
    start_week: int = 0
    end_week: int = 0

class StatCategory(BaseModel):
    stat_id: int
    name: str = ""
    display_name: str = ""
    sort_order: int = 0
    position_type: str = ""

class DraftResult(BaseModel):
    pick: int = 0
    round: int = 0
    team_key: str = ""
    team_name: Optional[str] = None
    player_key: str = ""

# ---- persisted rows ----

class LeagueRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    yahoo_league_id: str
    yahoo_game_key: str
    league_name: str
    season_year: int
    scoring_type: str
    num_teams: int
    current_week: int
    last_synced_at: Optional[datetime] = None

class LeagueImportRequest(BaseModel):
    yahoo_league_id: str
    user_team_id: str
    game_key: str = "nba"
