"""
Pydantic models for FPL API payloads and the views the tools return.

Upstream models keep the FPL API's own field names and ignore anything they
don't use. View models are what ends up in tool responses; they serialise
with camelCase keys.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN = "Unknown"


def _to_float(x: Any, default: float = 0.0) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


class _Upstream(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class _View(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --------------------
# Bootstrap snapshot
# --------------------


class Player(_Upstream):
    id: int
    web_name: str
    first_name: str = ""
    second_name: str = ""
    team: int
    element_type: int
    now_cost: int
    total_points: int = 0
    goals_scored: int = 0
    assists: int = 0
    # Usually a decimal string, occasionally a bare number
    selected_by_percent: str | float | None = None
    form: str | float | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.second_name}"

    @property
    def cost(self) -> float:
        return self.now_cost / 10

    @property
    def ownership(self) -> float:
        # Upstream sends a string; anything non-numeric counts as 0.0
        return _to_float(self.selected_by_percent)

    @property
    def form_value(self) -> float:
        return _to_float(self.form)


class Team(_Upstream):
    id: int
    name: str
    short_name: str
    code: int = 0


class PositionType(_Upstream):
    id: int
    singular_name: str
    singular_name_short: str = ""


class GameweekEvent(_Upstream):
    id: int
    deadline_time: str | None = None
    finished: bool = False
    is_current: bool = False
    is_next: bool = False


class BootstrapSnapshot(_Upstream):
    """The bootstrap-static payload at one point in time."""

    players: tuple[Player, ...] = Field(default=(), alias="elements")
    teams: tuple[Team, ...] = ()
    position_types: tuple[PositionType, ...] = Field(default=(), alias="element_types")
    events: tuple[GameweekEvent, ...] = ()

    def player(self, player_id: int) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    def team(self, team_id: int) -> Team | None:
        return next((t for t in self.teams if t.id == team_id), None)

    def position_type(self, type_id: int) -> PositionType | None:
        return next((et for et in self.position_types if et.id == type_id), None)

    def team_name(self, team_id: int) -> str:
        team = self.team(team_id)
        return team.name if team else UNKNOWN

    def position_name(self, type_id: int) -> str:
        position = self.position_type(type_id)
        return position.singular_name if position else UNKNOWN


# --------------------
# Other upstream payloads
# --------------------


class Fixture(_Upstream):
    id: int
    event: int | None = None
    team_h: int
    team_a: int
    kickoff_time: str | None = None
    team_h_score: int | None = None
    team_a_score: int | None = None
    finished: bool = False


class ManagerSummary(_Upstream):
    id: int
    name: str = ""
    current_event: int | None = None


class Pick(_Upstream):
    element: int
    position: int
    multiplier: int = 1
    is_captain: bool = False
    is_vice_captain: bool = False
    element_type: int | None = None


class EntryHistory(_Upstream):
    points: int = 0
    total_points: int = 0
    overall_rank: int | None = None
    rank: int | None = None
    value: int = 0
    bank: int = 0


class ManagerPicks(_Upstream):
    picks: tuple[Pick, ...] = ()
    entry_history: EntryHistory = Field(default_factory=EntryHistory)
    active_chip: str | None = None


# --------------------
# Tool views
# --------------------


class PlayerSearchResult(_View):
    id: int
    name: str
    full_name: str
    team: str
    team_id: int
    position: str
    cost: float


class TeamSearchResult(_View):
    id: int
    name: str
    short_name: str
    code: int


class PlayerStats(_View):
    id: int
    name: str
    position: str
    team: str
    total_points: int
    goals: int
    assists: int
    cost: float
    ownership: float
    form: float

    @classmethod
    def from_player(cls, player: Player, snapshot: BootstrapSnapshot) -> PlayerStats:
        return cls(
            id=player.id,
            name=player.web_name,
            position=snapshot.position_name(player.element_type),
            team=snapshot.team_name(player.team),
            total_points=player.total_points,
            goals=player.goals_scored,
            assists=player.assists,
            cost=player.cost,
            ownership=player.ownership,
            form=player.form_value,
        )


class GameweekStatus(_View):
    current: int
    deadline: str | None
    finished: bool
    next: int | None = None


class FixtureView(_View):
    id: int
    gameweek: int
    home_team: str
    away_team: str
    kickoff_time: str
    home_score: int | None = None
    away_score: int | None = None
    finished: bool


class TeamInfo(_View):
    id: int
    name: str
    short_name: str
    code: int
    players: list[PlayerStats]


class ComparisonSummary(_View):
    total_players: int
    valid_players: int
    invalid_players: int


class PlayerComparison(_View):
    valid_players: list[PlayerStats]
    invalid_player_ids: list[int]
    comparison: ComparisonSummary


class ManagerTeamPlayer(_View):
    id: int
    name: str
    position: str
    team: str
    cost: float
    is_captain: bool
    is_vice_captain: bool
    multiplier: int
    position_in_team: int


class ManagerTeam(_View):
    manager_id: int
    manager_name: str
    gameweek: int
    points: int
    total_points: int
    overall_rank: int | None
    gameweek_rank: int | None
    team_value: float
    bank: float
    active_chip: str | None
    starting_xi: list[ManagerTeamPlayer] = Field(alias="startingXI")
    bench: list[ManagerTeamPlayer]
    captain: ManagerTeamPlayer | None
    vice_captain: ManagerTeamPlayer | None
    formation: str
