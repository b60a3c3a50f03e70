"""Manager tools: a manager's picks for one gameweek, enriched from bootstrap data."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from fpl_query.context import ToolContext
from fpl_query.errors import ErrorCode, gameweek_not_found
from fpl_query.models import UNKNOWN, BootstrapSnapshot, ManagerTeam, ManagerTeamPlayer, Pick
from fpl_query.responses import Failure, Result, Success
from fpl_query.tools.base import guarded
from fpl_query.validation import ManagerTeamInput, validate_input

logger = logging.getLogger(__name__)

STARTING_SLOTS = 11


def _is_not_found(exc: httpx.HTTPStatusError) -> bool:
    return exc.response.status_code == 404


def _enrich_pick(pick: Pick, snapshot: BootstrapSnapshot) -> ManagerTeamPlayer:
    player = snapshot.player(pick.element)
    type_id = pick.element_type if pick.element_type is not None else (player.element_type if player else None)
    position = snapshot.position_name(type_id) if type_id is not None else UNKNOWN
    team = snapshot.team(player.team) if player else None
    return ManagerTeamPlayer(
        id=pick.element,
        name=player.web_name if player else UNKNOWN,
        position=position,
        team=team.short_name if team else UNKNOWN,
        cost=player.cost if player else 0.0,
        is_captain=pick.is_captain,
        is_vice_captain=pick.is_vice_captain,
        multiplier=pick.multiplier,
        position_in_team=pick.position,
    )


def calculate_formation(starting_xi: list[ManagerTeamPlayer]) -> str:
    """Defenders-midfielders-forwards over the starting XI; goalkeepers aren't counted."""
    counts = {"Defender": 0, "Midfielder": 0, "Forward": 0}
    for p in starting_xi:
        if p.position in counts:
            counts[p.position] += 1
    return f"{counts['Defender']}-{counts['Midfielder']}-{counts['Forward']}"


@guarded
async def get_manager_team(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(ManagerTeamInput, arguments, "Invalid manager team request")
    if isinstance(args, Failure):
        return args

    manager_id = args.managerId
    try:
        manager = await ctx.client.manager(manager_id)
    except httpx.HTTPStatusError as e:
        if not _is_not_found(e):
            raise
        return Failure(ErrorCode.PLAYER_NOT_FOUND, f"Manager with ID {manager_id} not found.", {"managerId": manager_id})

    gameweek = args.gameweek if args.gameweek is not None else manager.current_event
    if gameweek is None:
        return gameweek_not_found(
            message=f"Manager {manager_id} has no current gameweek; pass a gameweek explicitly.",
            managerId=manager_id,
        )

    no_picks = Failure(
        ErrorCode.NO_DATA_AVAILABLE,
        f"No team data available for manager {manager_id} in gameweek {gameweek}.",
        {"managerId": manager_id, "gameweek": gameweek},
    )
    try:
        picks = await ctx.client.manager_picks(manager_id, gameweek)
    except httpx.HTTPStatusError as e:
        if not _is_not_found(e):
            raise
        return no_picks
    if not picks.picks:
        return no_picks

    snapshot = await ctx.cache.get_snapshot()
    squad = sorted((_enrich_pick(p, snapshot) for p in picks.picks), key=lambda p: p.position_in_team)
    starting_xi = [p for p in squad if p.position_in_team <= STARTING_SLOTS]
    bench = [p for p in squad if p.position_in_team > STARTING_SLOTS]

    captain = next((p for p in squad if p.is_captain), None)
    vice_captain = next((p for p in squad if p.is_vice_captain), None)
    if captain is None or vice_captain is None:
        logger.warning(f"Captain or vice captain not found in picks (manager={manager_id}, gameweek={gameweek})")

    history = picks.entry_history
    return Success(
        ManagerTeam(
            manager_id=manager_id,
            manager_name=manager.name,
            gameweek=gameweek,
            points=history.points,
            total_points=history.total_points,
            overall_rank=history.overall_rank,
            gameweek_rank=history.rank,
            team_value=history.value / 10,
            bank=history.bank / 10,
            active_chip=picks.active_chip,
            starting_xi=starting_xi,
            bench=bench,
            captain=captain,
            vice_captain=vice_captain,
            formation=calculate_formation(starting_xi),
        )
    )
