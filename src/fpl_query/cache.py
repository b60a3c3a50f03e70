"""
In-memory cache for FPL bootstrap data, plus name and id lookups over it.

The bootstrap payload (every player, team, position and gameweek) is large
and changes roughly once per gameweek, so one snapshot is shared by all tool
calls and refetched once it is an hour old. The search helpers exist so an
assistant can resolve a name to an id instead of guessing.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from pydantic import ValidationError

from fpl_query.client import FPLClient
from fpl_query.errors import UPSTREAM_ERRORS, ErrorCode, FPLError, classify
from fpl_query.models import BootstrapSnapshot, Player, PlayerSearchResult, Team, TeamSearchResult

logger = logging.getLogger(__name__)

BOOTSTRAP_TTL = 3600  # 1 hour
MAX_PLAYER_RESULTS = 10


def _player_result(player: Player, snapshot: BootstrapSnapshot) -> PlayerSearchResult:
    return PlayerSearchResult(
        id=player.id,
        name=player.web_name,
        full_name=player.full_name,
        team=snapshot.team_name(player.team),
        team_id=player.team,
        position=snapshot.position_name(player.element_type),
        cost=player.cost,
    )


def _team_result(team: Team) -> TeamSearchResult:
    return TeamSearchResult(id=team.id, name=team.name, short_name=team.short_name, code=team.code)


def _player_matches(player: Player, q: str) -> bool:
    web = player.web_name.lower()
    first = player.first_name.lower()
    second = player.second_name.lower()
    return q in web or q in f"{first} {second}" or q in first or q in second


class BootstrapCache:
    """One bootstrap snapshot with a fixed time-to-live."""

    def __init__(
        self,
        client: FPLClient,
        ttl: float = BOOTSTRAP_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._ttl = ttl
        self._clock = clock
        self._snapshot: BootstrapSnapshot | None = None
        self._fetched_at: float = 0.0

    @property
    def is_fresh(self) -> bool:
        return self._snapshot is not None and (self._clock() - self._fetched_at) < self._ttl

    async def get_snapshot(self) -> BootstrapSnapshot:
        """Return the cached snapshot, fetching a new one if it is missing or stale."""
        if self.is_fresh:
            return self._snapshot

        now = self._clock()
        try:
            raw = await self._client.bootstrap()
            snapshot = BootstrapSnapshot.model_validate(raw)
        except FPLError:
            raise
        except UPSTREAM_ERRORS as e:
            cause = classify(e)
            logger.warning(f"Bootstrap fetch failed ({cause.code.value}): {e}")
            details = {"cause": cause.code.value}
            if isinstance(e, ValidationError):
                details["errors"] = e.error_count()
            raise FPLError(
                ErrorCode.NO_DATA_AVAILABLE,
                "Failed to fetch bootstrap data from FPL API",
                details,
            ) from e

        if not (snapshot.players and snapshot.teams and snapshot.position_types):
            raise FPLError(
                ErrorCode.NO_DATA_AVAILABLE,
                "Failed to fetch bootstrap data from FPL API",
                {
                    "players": len(snapshot.players),
                    "teams": len(snapshot.teams),
                    "positionTypes": len(snapshot.position_types),
                },
            )

        self._snapshot = snapshot
        self._fetched_at = now
        logger.info(
            f"Bootstrap cached: {len(snapshot.players)} players, {len(snapshot.teams)} teams, "
            f"{len(snapshot.events)} events"
        )
        return snapshot

    async def search_players(self, query: str) -> list[PlayerSearchResult]:
        """Substring match on display, full, first or last name. Snapshot order, first 10 hits."""
        snapshot = await self.get_snapshot()
        q = query.strip().lower()

        hits: list[PlayerSearchResult] = []
        for player in snapshot.players:
            if len(hits) >= MAX_PLAYER_RESULTS:
                break
            if _player_matches(player, q):
                hits.append(_player_result(player, snapshot))
        return hits

    async def get_player_by_id(self, player_id: int) -> PlayerSearchResult | None:
        snapshot = await self.get_snapshot()
        player = snapshot.player(player_id)
        if player is None:
            return None
        return _player_result(player, snapshot)

    async def search_teams(self, query: str) -> list[TeamSearchResult]:
        """Substring match on full name or short code."""
        snapshot = await self.get_snapshot()
        q = query.strip().lower()
        return [
            _team_result(t)
            for t in snapshot.teams
            if q in t.name.lower() or q in t.short_name.lower()
        ]

    async def get_team_by_id(self, team_id: int) -> TeamSearchResult | None:
        snapshot = await self.get_snapshot()
        team = snapshot.team(team_id)
        if team is None:
            return None
        return _team_result(team)

    def invalidate(self) -> None:
        """Drop the snapshot so the next access refetches."""
        self._snapshot = None
        self._fetched_at = 0.0
