"""
Error taxonomy and classification.

Every failure a tool can report maps onto one of a closed set of codes.
Domain errors (unknown player, unknown team, ...) are built directly as
``Failure`` values by the handlers. Upstream failures surface as httpx or
parsing exceptions and are turned into ``Failure`` values by ``classify``.
"""

from __future__ import annotations

import json
import traceback
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from fpl_query.config import Settings
from fpl_query.responses import Failure


class ErrorCode(str, Enum):
    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PLAYER_ID = "INVALID_PLAYER_ID"
    INVALID_GAMEWEEK = "INVALID_GAMEWEEK"
    INVALID_TEAM_ID = "INVALID_TEAM_ID"

    # Upstream API
    API_UNAVAILABLE = "API_UNAVAILABLE"
    API_TIMEOUT = "API_TIMEOUT"
    API_RATE_LIMITED = "API_RATE_LIMITED"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"

    # Data
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    TEAM_NOT_FOUND = "TEAM_NOT_FOUND"
    GAMEWEEK_NOT_FOUND = "GAMEWEEK_NOT_FOUND"
    NO_DATA_AVAILABLE = "NO_DATA_AVAILABLE"

    # System
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


RETRYABLE_CODES = frozenset({ErrorCode.API_TIMEOUT, ErrorCode.NETWORK_ERROR, ErrorCode.API_UNAVAILABLE})

# Exceptions the upstream client and the snapshot parser can raise.
UPSTREAM_ERRORS = (httpx.HTTPError, json.JSONDecodeError, ValidationError)


class FPLError(Exception):
    """An error that already knows its code."""

    def __init__(self, code: ErrorCode, message: str, details: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_failure(self) -> Failure:
        return Failure(self.code, self.message, self.details)


def _status_code(exc: BaseException) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


def classify(exc: BaseException) -> Failure:
    """Map a raised failure to a code and a user-facing message."""
    if isinstance(exc, FPLError):
        return exc.to_failure()

    status = _status_code(exc)
    if status == 429:
        return Failure(
            ErrorCode.API_RATE_LIMITED,
            "FPL API rate limit exceeded. Please try again later.",
            {"status": status},
        )
    if isinstance(exc, httpx.ConnectError):
        return Failure(
            ErrorCode.NETWORK_ERROR,
            "Unable to connect to FPL API. Please check your internet connection.",
            {"error": str(exc)},
        )
    if isinstance(exc, httpx.TimeoutException):
        return Failure(
            ErrorCode.API_TIMEOUT,
            "FPL API request timed out. Please try again.",
            {"error": str(exc)},
        )
    if status is not None and status >= 500:
        return Failure(
            ErrorCode.API_UNAVAILABLE,
            "FPL API is currently unavailable. Please try again later.",
            {"status": status},
        )
    return Failure(
        ErrorCode.API_INVALID_RESPONSE,
        "Received invalid response from FPL API.",
        {"error": str(exc)},
    )


def is_retryable(code: ErrorCode) -> bool:
    """Whether a caller may sensibly retry. Nothing in this server retries on its own."""
    return code in RETRYABLE_CODES


def internal_error(exc: BaseException, settings: Settings) -> Failure:
    details = None
    if not settings.is_production:
        details = {
            "error": str(exc),
            "type": type(exc).__name__,
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        }
    return Failure(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred. Please try again.", details)


def validation_failure(message: str, details: Any = None) -> Failure:
    return Failure(ErrorCode.VALIDATION_ERROR, message, details)


def player_not_found(player_id: int) -> Failure:
    return Failure(ErrorCode.PLAYER_NOT_FOUND, f"Player with ID {player_id} not found.", {"playerId": player_id})


def team_not_found(team_id: int) -> Failure:
    return Failure(ErrorCode.TEAM_NOT_FOUND, f"Team with ID {team_id} not found.", {"teamId": team_id})


def gameweek_not_found(gameweek: int | None = None, message: str | None = None, **details: Any) -> Failure:
    if gameweek is not None:
        details = {"gameweek": gameweek, **details}
    return Failure(
        ErrorCode.GAMEWEEK_NOT_FOUND,
        message or f"Gameweek {gameweek} not found or no data available.",
        details or None,
    )
