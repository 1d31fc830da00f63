from .leagues import LeagueRepository
from .players import PlayerRepository
from .rosters import RosterRepository
from .teams import TeamRepository

__all__ = ["LeagueRepository", "PlayerRepository", "RosterRepository", "TeamRepository"]
