from .client import YahooClient
from .draft import get_league_draft_results, get_team_draft_results
from .games import get_game_id, get_game_key
from .leagues import get_league_teams, get_stat_categories, get_user_leagues
from .players import get_league_players, get_player_stats
from .roster import get_team_roster
from .scoreboard import get_league_matchups
from .standings import get_league_standings
from .transactions import get_league_transactions

__all__ = [
    "YahooClient",
    "get_game_id",
    "get_game_key",
    "get_user_leagues",
    "get_league_teams",
    "get_stat_categories",
    "get_team_roster",
    "get_league_standings",
    "get_league_matchups",
    "get_league_players",
    "get_player_stats",
    "get_league_draft_results",
    "get_team_draft_results",
    "get_league_transactions",
]
