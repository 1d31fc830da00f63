from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class SeasonAverages(BaseModel):
    """Per-game season line for one player, the input to valuation."""
    player_id: int
    primary_position: str = "F"
    points_per_game: float = 0.0
    rebounds_per_game: float = 0.0
    assists_per_game: float = 0.0
    steals_per_game: float = 0.0
    blocks_per_game: float = 0.0
    turnovers_per_game: float = 0.0
    field_goal_percentage: float = 0.0
    free_throw_percentage: float = 0.0
    three_pointers_made: float = 0.0

class CategoryProjections(BaseModel):
    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    to: float = 0.0
    fg_pct: float = 0.0
    ft_pct: float = 0.0
    tpm: float = 0.0

class PlayerValue(BaseModel):
    player_id: int
    league_id: Optional[int] = None
    position: str = "F"
    fpg: float = 0.0
    z_score: float = 0.0
    overall_rank: int = 0
    scarcity_multiplier: float = 1.0
    projections: CategoryProjections = Field(default_factory=CategoryProjections)

class PlayerProjectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: int
    league_id: int
    fpg: float
    z_score: float
    overall_rank: int
    scarcity_multiplier: float

class PlayerProjection(BaseModel):
    """One player's stored projection line, as the trade services consume it."""
    player_id: int
    position: str = "F"
    fpg: float = 0.0
    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    to: float = 0.0
    fg_pct: float = 0.0
    ft_pct: float = 0.0
    tpm: float = 0.0
