from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class Team(BaseModel):
    yahoo_team_id: str
    yahoo_team_key: str
    team_name: str
    manager_name: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    rank: int = 0
    points_for: float = 0.0
    points_against: float = 0.0

class RosterEntry(BaseModel):
    player_id: str
    player_key: str
    full_name: str = ""
    position: str = ""                  # first eligible position
    eligible_positions: List[str] = []
    selected_position: str = ""         # lineup slot: PG, UTIL, BN, IL ...
    is_starting: bool = False
    editorial_team_abbr: Optional[str] = None
    status: Optional[str] = None        # INJ, O, DTD ...

# ---- standings ----

class Manager(BaseModel):
    manager_id: str = ""
    nickname: str = ""
    guid: str = ""
    is_commissioner: bool = False
    is_current_login: bool = False
    email: Optional[str] = None
    image_url: Optional[str] = None

class OutcomeTotals(BaseModel):
    wins: int = 0
    losses: int = 0
    ties: int = 0
    percentage: float = 0.0

class Streak(BaseModel):
    type: str = ""
    value: int = 0

class TeamStandings(BaseModel):
    rank: int = 0
    playoff_seed: int = 0
    outcome_totals: OutcomeTotals = Field(default_factory=OutcomeTotals)
    points_for: float = 0.0
    points_against: float = 0.0
    games_back: Optional[str] = None
    streak: Optional[Streak] = None

class StandingsTeam(BaseModel):
    team_key: str
    team_id: str = ""
    name: str = ""
    team_standings: TeamStandings = Field(default_factory=TeamStandings)
    manager_nickname: Optional[str] = None
    managers: List[Manager] = []

class Standings(BaseModel):
    teams: List[StandingsTeam] = []

# ---- persisted rows ----

class TeamRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    league_id: int
    yahoo_team_id: str
    yahoo_team_key: str
    team_name: str
    manager_name: str
    is_user_team: bool
    wins: int
    losses: int
    ties: int
    rank: int
    updated_at: Optional[datetime] = None
