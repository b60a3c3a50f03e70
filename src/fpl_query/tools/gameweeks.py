"""Gameweek tools: current gameweek status and per-gameweek fixtures."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateparser

from fpl_query.context import ToolContext
from fpl_query.errors import ErrorCode, FPLError, gameweek_not_found
from fpl_query.models import FixtureView, GameweekStatus
from fpl_query.responses import Failure, Result, Success
from fpl_query.tools.base import guarded
from fpl_query.validation import CurrentGameweekInput, GameweekFixturesInput, validate_input

logger = logging.getLogger(__name__)

TBD = "TBD"


def _kickoff_sort_key(fx: FixtureView) -> tuple[int, datetime]:
    """Scheduled fixtures by kickoff (UTC), unscheduled ones last."""
    if fx.kickoff_time == TBD:
        return (1, datetime.min.replace(tzinfo=timezone.utc))
    try:
        dt = dateparser.isoparse(fx.kickoff_time)
    except (ValueError, TypeError):
        return (1, datetime.min.replace(tzinfo=timezone.utc))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (0, dt)


@guarded
async def get_current_gameweek(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(CurrentGameweekInput, arguments)
    if isinstance(args, Failure):
        return args

    snapshot = await ctx.cache.get_snapshot()
    events = snapshot.events
    if not events:
        return Failure(ErrorCode.NO_DATA_AVAILABLE, "No gameweek data available from FPL API")

    current = next((e for e in events if e.is_current), None)
    nxt = next((e for e in events if e.is_next), None)

    if current is None:
        if nxt is None:
            return gameweek_not_found(message="Unable to determine current or next gameweek")
        # Between gameweeks: report the upcoming one as current
        return Success(GameweekStatus(current=nxt.id, deadline=nxt.deadline_time, finished=False, next=None))

    return Success(
        GameweekStatus(
            current=current.id,
            deadline=current.deadline_time,
            finished=current.finished,
            next=nxt.id if nxt else None,
        )
    )


@guarded
async def get_gameweek_fixtures(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
    args = validate_input(GameweekFixturesInput, arguments, "Invalid gameweek provided")
    if isinstance(args, Failure):
        return args

    snapshot = await ctx.cache.get_snapshot()
    team_names = {t.id: t.name for t in snapshot.teams}

    fixtures = await ctx.client.fixtures()
    views: list[FixtureView] = []
    for fx in fixtures:
        if fx.event != args.gameweek:
            continue
        home, away = team_names.get(fx.team_h), team_names.get(fx.team_a)
        if home is None or away is None:
            raise FPLError(
                ErrorCode.API_INVALID_RESPONSE,
                f"Unable to find team names for fixture {fx.id}",
                {"fixtureId": fx.id, "teamH": fx.team_h, "teamA": fx.team_a},
            )
        views.append(
            FixtureView(
                id=fx.id,
                gameweek=args.gameweek,
                home_team=home,
                away_team=away,
                kickoff_time=fx.kickoff_time or TBD,
                home_score=fx.team_h_score,
                away_score=fx.team_a_score,
                finished=fx.finished,
            )
        )

    if not views:
        logger.info(f"No fixtures scheduled yet for gameweek {args.gameweek}")
    views.sort(key=_kickoff_sort_key)
    return Success(views)
