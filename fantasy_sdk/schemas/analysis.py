from __future__ import annotations
from typing import Dict, List
from pydantic import BaseModel

class CategoryScore(BaseModel):
    category: str
    z_score: float

class TeamCategoryTotals(BaseModel):
    """Starting-roster projection totals; FG%/FT% are averages, the rest sums."""
    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    to: float = 0.0
    fg_pct: float = 0.0
    ft_pct: float = 0.0
    tpm: float = 0.0

class TeamAnalysis(BaseModel):
    team_id: int
    category_scores: Dict[str, float] = {}
    weak_categories: List[CategoryScore] = []
    strong_categories: List[CategoryScore] = []
    position_needs: List[str] = []
