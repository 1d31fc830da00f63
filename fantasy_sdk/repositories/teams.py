from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_sdk.db.models import FantasyTeam


class TeamRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, team: FantasyTeam) -> FantasyTeam:
        self.db.add(team)
        self.db.flush()
        return team

    def get(self, team_id: int) -> Optional[FantasyTeam]:
        return self.db.get(FantasyTeam, team_id)

    def get_by_key(self, league_id: int, yahoo_team_key: str) -> Optional[FantasyTeam]:
        return self.db.scalar(
            select(FantasyTeam).where(
                FantasyTeam.league_id == league_id,
                FantasyTeam.yahoo_team_key == yahoo_team_key,
            )
        )

    def get_by_league(self, league_id: int) -> List[FantasyTeam]:
        # unranked (0) teams go last
        return list(self.db.scalars(
            select(FantasyTeam)
            .where(FantasyTeam.league_id == league_id)
            .order_by((FantasyTeam.rank == 0), FantasyTeam.rank, FantasyTeam.id)
        ))

    def get_user_team(self, league_id: int) -> Optional[FantasyTeam]:
        return self.db.scalar(
            select(FantasyTeam).where(FantasyTeam.league_id == league_id, FantasyTeam.is_user_team.is_(True))
        )

    def update(self, team: FantasyTeam) -> FantasyTeam:
        self.db.add(team)
        self.db.flush()
        return team
