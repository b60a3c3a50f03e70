"""Thin async client for the public FPL API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from fpl_query.config import Settings
from fpl_query.errors import ErrorCode, FPLError
from fpl_query.models import Fixture, ManagerPicks, ManagerSummary

logger = logging.getLogger(__name__)


class FPLClient:
    """
    One long-lived ``httpx.AsyncClient`` shared by every tool call.

    Methods raise ``httpx.HTTPStatusError`` for non-2xx responses and let
    transport errors propagate; callers classify them.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self._http = httpx.AsyncClient(
            base_url=settings.fpl_api_base.rstrip("/") + "/",
            headers={"User-Agent": settings.fpl_user_agent, "Accept": "application/json"},
            timeout=settings.http_timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def _get_json(self, path: str) -> Any:
        logger.debug(f"GET {path}")
        r = await self._http.get(path.lstrip("/"))
        r.raise_for_status()
        return r.json()

    async def bootstrap(self) -> dict[str, Any]:
        """Raw bootstrap-static payload; parsed and checked by the cache."""
        return await self._get_json("bootstrap-static/")

    async def fixtures(self) -> list[Fixture]:
        data = await self._get_json("fixtures/")
        if not isinstance(data, list):
            raise FPLError(ErrorCode.API_INVALID_RESPONSE, "Unable to retrieve fixtures data from FPL API.")
        return [Fixture.model_validate(fx) for fx in data]

    async def manager(self, manager_id: int) -> ManagerSummary:
        return ManagerSummary.model_validate(await self._get_json(f"entry/{manager_id}/"))

    async def manager_picks(self, manager_id: int, event_id: int) -> ManagerPicks:
        return ManagerPicks.model_validate(await self._get_json(f"entry/{manager_id}/event/{event_id}/picks/"))

    async def aclose(self) -> None:
        await self._http.aclose()
