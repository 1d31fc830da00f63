from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

class CategoryChange(BaseModel):
    category: str
    change: float
    percent_change: float = 0.0

class TradeImpact(BaseModel):
    team_id: int
    value_change: float = 0.0
    category_improvements: List[CategoryChange] = []
    category_declines: List[CategoryChange] = []
    position_impact: str = ""
    net_benefit: float = 0.0

class TradeEvaluation(BaseModel):
    team_a_impact: TradeImpact
    team_b_impact: TradeImpact
    fairness_score: float
    is_fair: bool
    recommendation: str = ""

class TradePlayer(BaseModel):
    player_id: int
    player_name: str = ""
    position: str = "F"
    fpg: float = 0.0

class TradeSuggestion(BaseModel):
    id: Optional[int] = None
    league_id: int
    team_a_id: int
    team_a_name: str = ""
    team_a_gives: List[TradePlayer] = []
    team_b_id: int
    team_b_name: str = ""
    team_b_gives: List[TradePlayer] = []
    fairness_score: float = 0.0
    team_a_benefit: str = ""
    team_b_benefit: str = ""
    recommendation: str = ""

class TradeProposal(BaseModel):
    league_id: int
    team_a_id: int
    team_b_id: int
    team_a_gives: List[int] = []
    team_b_gives: List[int] = []
    fairness_score: float = 0.0
    team_a_value_change: float = 0.0
    team_b_value_change: float = 0.0
    team_a_benefits: str = ""
    team_b_benefits: str = ""
    source: str = "user"
    status: str = "pending"

class TradeEvaluateRequest(BaseModel):
    league_id: int
    team_a_id: int
    team_a_gives: List[int] = Field(default_factory=list)
    team_b_id: int
    team_b_gives: List[int] = Field(default_factory=list)
    save: bool = False                  # also store as a proposal
