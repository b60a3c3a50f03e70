"""
Input models for each tool.

Integers are strict: JSON booleans, floats and numeric strings are rejected
rather than coerced. Unknown keys are ignored.
"""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, Strict, StringConstraints, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from fpl_query.errors import validation_failure
from fpl_query.responses import Failure

PlayerId = Annotated[int, Strict(), Field(ge=1, le=1000)]
Gameweek = Annotated[int, Strict(), Field(ge=1, le=38)]
TeamId = Annotated[int, Strict(), Field(ge=1, le=20)]
ManagerId = Annotated[int, Strict(), Field(ge=1, le=10_000_000)]
Query = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=100)]


class _Input(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class SearchInput(_Input):
    query: Query


class PlayerStatsInput(_Input):
    playerId: PlayerId


class GameweekFixturesInput(_Input):
    gameweek: Gameweek


class TeamInfoInput(_Input):
    teamId: TeamId


class CurrentGameweekInput(_Input):
    pass


class ManagerTeamInput(_Input):
    managerId: ManagerId
    gameweek: Gameweek | None = None


class ComparePlayersInput(_Input):
    # Ids above the player-id ceiling are let through and reported as unresolved.
    playerIds: Annotated[list[Annotated[int, Strict(), Field(ge=1)]], Field(min_length=2, max_length=10)]

    @field_validator("playerIds")
    @classmethod
    def _unique(cls, ids: list[int]) -> list[int]:
        if len(set(ids)) != len(ids):
            raise PydanticCustomError("unique", "Duplicate player IDs are not allowed")
        return ids


M = TypeVar("M", bound=BaseModel)


def _issues(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": ".".join(str(p) for p in err["loc"]),
            "message": err["msg"],
            "code": err["type"],
        }
        for err in exc.errors()
    ]


def validate_input(model: type[M], arguments: Any, message: str = "Invalid input parameters") -> M | Failure:
    """Parse ``arguments`` into ``model`` or report every violated rule."""
    try:
        return model.model_validate(arguments if arguments is not None else {})
    except ValidationError as e:
        return validation_failure(message, _issues(e))
