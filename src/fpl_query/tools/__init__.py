"""Tool handlers, keyed by the name they are registered under."""

from .base import Handler, guarded
from .gameweeks import get_current_gameweek, get_gameweek_fixtures
from .managers import calculate_formation, get_manager_team
from .players import compare_players, get_player_stats, search_players
from .teams import get_team_info, search_teams

HANDLERS: dict[str, Handler] = {
    "search_players": search_players,
    "search_teams": search_teams,
    "get_current_gameweek": get_current_gameweek,
    "get_player_stats": get_player_stats,
    "get_gameweek_fixtures": get_gameweek_fixtures,
    "compare_players": compare_players,
    "get_team_info": get_team_info,
    "get_manager_team": get_manager_team,
}

__all__ = [
    "HANDLERS",
    "Handler",
    "guarded",
    "calculate_formation",
    "compare_players",
    "get_current_gameweek",
    "get_gameweek_fixtures",
    "get_manager_team",
    "get_player_stats",
    "get_team_info",
    "search_players",
    "search_teams",
]
