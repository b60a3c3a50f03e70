"""Pytest configuration and shared fixtures for all tests."""

import copy
import json
from typing import Any

import httpx
import pytest

from fpl_query.config import Settings
from fpl_query.context import ToolContext

BOOTSTRAP: dict[str, Any] = {
    "elements": [
        {
            "id": 1,
            "web_name": "Salah",
            "first_name": "Mohamed",
            "second_name": "Salah",
            "team": 1,
            "element_type": 3,
            "now_cost": 125,
            "total_points": 211,
            "goals_scored": 19,
            "assists": 12,
            "selected_by_percent": "45.3",
            "form": "7.5",
        },
        {
            "id": 2,
            "web_name": "Haaland",
            "first_name": "Erling",
            "second_name": "Haaland",
            "team": 2,
            "element_type": 4,
            "now_cost": 140,
            "total_points": 190,
            "goals_scored": 25,
            "assists": 4,
            "selected_by_percent": "n/a",
            "form": "",
        },
        {
            "id": 3,
            "web_name": "Alexander-Arnold",
            "first_name": "Trent",
            "second_name": "Alexander-Arnold",
            "team": 1,
            "element_type": 2,
            "now_cost": 70,
            "total_points": 120,
            "goals_scored": 2,
            "assists": 9,
            "selected_by_percent": "12.0",
            "form": "4.1",
        },
        {
            "id": 4,
            "web_name": "Alisson",
            "first_name": "Alisson",
            "second_name": "Ramses Becker",
            "team": 1,
            "element_type": 1,
            "now_cost": 55,
            "total_points": 98,
            "goals_scored": 0,
            "assists": 0,
            "selected_by_percent": "8.2",
            "form": "3.0",
        },
        {
            "id": 5,
            "web_name": "Bloggs",
            "first_name": "Joe",
            "second_name": "Bloggs",
            "team": 99,
            "element_type": 9,
            "now_cost": 45,
            "total_points": 0,
            "goals_scored": 0,
            "assists": 0,
            "selected_by_percent": "0.1",
            "form": "0.0",
        },
    ],
    "teams": [
        {"id": 1, "name": "Liverpool", "short_name": "LIV", "code": 14},
        {"id": 2, "name": "Man City", "short_name": "MCI", "code": 43},
        {"id": 3, "name": "Arsenal", "short_name": "ARS", "code": 3},
    ],
    "element_types": [
        {"id": 1, "singular_name": "Goalkeeper", "singular_name_short": "GKP"},
        {"id": 2, "singular_name": "Defender", "singular_name_short": "DEF"},
        {"id": 3, "singular_name": "Midfielder", "singular_name_short": "MID"},
        {"id": 4, "singular_name": "Forward", "singular_name_short": "FWD"},
    ],
    "events": [
        {"id": 4, "deadline_time": "2025-09-13T10:00:00Z", "finished": True, "is_current": False, "is_next": False},
        {"id": 5, "deadline_time": "2025-09-20T10:00:00Z", "finished": False, "is_current": True, "is_next": False},
        {"id": 6, "deadline_time": "2025-09-27T10:00:00Z", "finished": False, "is_current": False, "is_next": True},
    ],
}

FIXTURES: list[dict[str, Any]] = [
    {"id": 41, "event": 5, "team_h": 1, "team_a": 2, "kickoff_time": "2025-09-21T15:30:00Z",
     "team_h_score": None, "team_a_score": None, "finished": False},
    {"id": 42, "event": 5, "team_h": 3, "team_a": 1, "kickoff_time": None,
     "team_h_score": None, "team_a_score": None, "finished": False},
    {"id": 43, "event": 5, "team_h": 2, "team_a": 3, "kickoff_time": "2025-09-20T11:30:00Z",
     "team_h_score": 2, "team_a_score": 1, "finished": True},
    {"id": 51, "event": 6, "team_h": 1, "team_a": 3, "kickoff_time": "2025-09-27T14:00:00Z",
     "team_h_score": None, "team_a_score": None, "finished": False},
    {"id": 99, "event": None, "team_h": 2, "team_a": 1, "kickoff_time": None,
     "team_h_score": None, "team_a_score": None, "finished": False},
]


class FakeFPL:
    """Stands in for the FPL API behind an httpx.MockTransport.

    ``routes`` maps an API path (``"bootstrap-static/"``) to a JSON payload,
    an ``httpx.Response`` or an exception to raise. Unknown paths get a 404.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = routes or {}
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.split("/api/", 1)[-1]
        self.calls.append(path)
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def count(self, path: str) -> int:
        return self.calls.count(path)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def bootstrap_payload() -> dict[str, Any]:
    return copy.deepcopy(BOOTSTRAP)


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="development", log_level="DEBUG")


@pytest.fixture
def fake_fpl(bootstrap_payload) -> FakeFPL:
    return FakeFPL({"bootstrap-static/": bootstrap_payload, "fixtures/": copy.deepcopy(FIXTURES)})


@pytest.fixture
def ctx(settings, fake_fpl) -> ToolContext:
    return ToolContext.create(settings, transport=fake_fpl.transport)


def envelope(contents) -> dict[str, Any]:
    """Decode the single TextContent a tool call returns."""
    assert len(contents) == 1
    assert contents[0].type == "text"
    return json.loads(contents[0].text)
