"""Player tools: name search, single-player stats, side-by-side comparison."""

from __future__ import annotations

from typing import Any

from fpl_query.context import ToolContext
from fpl_query.errors import ErrorCode, player_not_found
from fpl_query.models import ComparisonSummary, PlayerComparison, PlayerStats
from fpl_query.responses import Failure, Result, Success
from fpl_query.tools.base import guarded
from fpl_query.validation import ComparePlayersInput, PlayerStatsInput, SearchInput, validate_input


@guarded
async def search_players(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(SearchInput, arguments, "Invalid search query provided")
    if isinstance(args, Failure):
        return args

    players = await ctx.cache.search_players(args.query)
    if not players:
        return Success({
            "message": f'No players found matching "{args.query}". Try a different search term.',
            "results": [],
        })
    return Success({
        "message": f'Found {len(players)} player(s) matching "{args.query}"',
        "results": players,
    })


@guarded
async def get_player_stats(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(PlayerStatsInput, arguments, "Invalid player ID provided")
    if isinstance(args, Failure):
        return args

    snapshot = await ctx.cache.get_snapshot()
    player = snapshot.player(args.playerId)
    if player is None:
        return player_not_found(args.playerId)
    return Success(PlayerStats.from_player(player, snapshot))


@guarded
async def compare_players(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    """Compare several players; unknown ids are reported, not fatal, unless none resolve."""
    args = validate_input(ComparePlayersInput, arguments, "Invalid player IDs provided for comparison")
    if isinstance(args, Failure):
        return args

    snapshot = await ctx.cache.get_snapshot()
    valid: list[PlayerStats] = []
    invalid: list[int] = []
    for pid in args.playerIds:
        player = snapshot.player(pid)
        if player is None:
            invalid.append(pid)
            continue
        valid.append(PlayerStats.from_player(player, snapshot))

    if not valid:
        return Failure(
            ErrorCode.PLAYER_NOT_FOUND,
            "None of the provided player IDs were found.",
            {"invalidPlayerIds": invalid},
        )

    return Success(
        PlayerComparison(
            valid_players=valid,
            invalid_player_ids=invalid,
            comparison=ComparisonSummary(
                total_players=len(args.playerIds),
                valid_players=len(valid),
                invalid_players=len(invalid),
            ),
        )
    )
