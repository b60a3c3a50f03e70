"""Process-wide collaborators handed to every tool handler."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from fpl_query.cache import BootstrapCache
from fpl_query.client import FPLClient
from fpl_query.config import Settings


@dataclass
class ToolContext:
    settings: Settings
    client: FPLClient
    cache: BootstrapCache

    @classmethod
    def create(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> ToolContext:
        client = FPLClient(settings, transport=transport)
        return cls(settings=settings, client=client, cache=BootstrapCache(client))

    async def aclose(self) -> None:
        await self.client.aclose()
