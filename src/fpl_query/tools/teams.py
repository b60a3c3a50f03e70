"""Team tools: name search and squad listing."""

from __future__ import annotations

from typing import Any

from fpl_query.context import ToolContext
from fpl_query.errors import team_not_found
from fpl_query.models import PlayerStats, TeamInfo
from fpl_query.responses import Failure, Result, Success
from fpl_query.tools.base import guarded
from fpl_query.validation import SearchInput, TeamInfoInput, validate_input


@guarded
async def search_teams(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(SearchInput, arguments, "Invalid search query provided")
    if isinstance(args, Failure):
        return args

    teams = await ctx.cache.search_teams(args.query)
    if not teams:
        return Success({
            "message": f'No teams found matching "{args.query}". Try a different search term.',
            "results": [],
        })
    return Success({
        "message": f'Found {len(teams)} team(s) matching "{args.query}"',
        "results": teams,
    })


@guarded
async def get_team_info(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(TeamInfoInput, arguments, "Invalid team ID provided")
    if isinstance(args, Failure):
        return args

    snapshot = await ctx.cache.get_snapshot()
    team = snapshot.team(args.teamId)
    if team is None:
        return team_not_found(args.teamId)

    squad = [PlayerStats.from_player(p, snapshot) for p in snapshot.players if p.team == team.id]
    return Success(
        TeamInfo(id=team.id, name=team.name, short_name=team.short_name, code=team.code, players=squad)
    )
