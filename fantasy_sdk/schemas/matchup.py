from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

from fantasy_sdk.schemas.player import Stat

class TeamPoints(BaseModel):
    coverage_type: str = ""
    week: Optional[int] = None
    total: float = 0.0

class MatchupTeam(BaseModel):
    team_key: str
    team_id: str = ""
    name: str = ""
    points: float = 0.0
    projected_points: float = 0.0
    is_winner: bool = False
    win_probability: Optional[float] = None
    stats: List[Stat] = []
    team_points: TeamPoints = Field(default_factory=TeamPoints)
    team_projected_points: TeamPoints = Field(default_factory=TeamPoints)

class Matchup(BaseModel):
    week: int = 0
    week_start: str = ""
    week_end: str = ""
    status: str = ""
    is_playoffs: bool = False
    is_consolation: bool = False
    is_tied: bool = False
    winner_team_key: Optional[str] = None
    teams: List[MatchupTeam] = []
