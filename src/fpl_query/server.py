"""MCP server wiring and the process entry point."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import sys
import time
from typing import Any, Callable

import uvicorn
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from fpl_query import __version__
from fpl_query.config import Settings, get_settings
from fpl_query.context import ToolContext
from fpl_query.errors import ErrorCode, internal_error
from fpl_query.log import configure_logging
from fpl_query.responses import Failure, render
from fpl_query.tools import HANDLERS

logger = logging.getLogger("fpl-query")

SERVER_NAME = "fpl-query"

_PLAYER_ID = {"type": "integer", "minimum": 1, "maximum": 1000}
_QUERY = {"type": "string", "minLength": 1, "maxLength": 100}

# --------------------
# MCP server + tools
# --------------------
TOOLS: list[Tool] = [
    Tool(
        name="search_players",
        description="Search for players by name to find their IDs. Use this FIRST before calling get_player_stats or compare_players.",
        inputSchema={
            "type": "object",
            "properties": {"query": {**_QUERY, "description": "Player name or part of it"}},
            "required": ["query"],
        },
    ),
    Tool(
        name="search_teams",
        description="Search for teams by name or short code to find their IDs. Use this FIRST before calling get_team_info.",
        inputSchema={
            "type": "object",
            "properties": {"query": {**_QUERY, "description": "Team name or short code"}},
            "required": ["query"],
        },
    ),
    Tool(
        name="get_current_gameweek",
        description="Get the current gameweek status including number, deadline, and completion status.",
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    Tool(
        name="get_player_stats",
        description="Get season statistics for a player by ID. Use search_players first to find the player ID.",
        inputSchema={
            "type": "object",
            "properties": {"playerId": {**_PLAYER_ID, "description": "FPL element id"}},
            "required": ["playerId"],
        },
    ),
    Tool(
        name="get_gameweek_fixtures",
        description="Get all fixtures for a gameweek, ordered by kickoff time.",
        inputSchema={
            "type": "object",
            "properties": {"gameweek": {"type": "integer", "minimum": 1, "maximum": 38, "description": "Gameweek number"}},
            "required": ["gameweek"],
        },
    ),
    Tool(
        name="compare_players",
        description="Compare statistics between 2-10 players. Use search_players first to find player IDs.",
        inputSchema={
            "type": "object",
            "properties": {
                "playerIds": {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 1},
                    "minItems": 2,
                    "maxItems": 10,
                    "uniqueItems": True,
                    "description": "FPL element ids",
                },
            },
            "required": ["playerIds"],
        },
    ),
    Tool(
        name="get_team_info",
        description="Get team information including current squad. Use search_teams first to find the team ID.",
        inputSchema={
            "type": "object",
            "properties": {"teamId": {"type": "integer", "minimum": 1, "maximum": 20, "description": "FPL team id"}},
            "required": ["teamId"],
        },
    ),
    Tool(
        name="get_manager_team",
        description="Get a manager's team for a gameweek: starting XI, bench, captaincy, formation and points.",
        inputSchema={
            "type": "object",
            "properties": {
                "managerId": {"type": "integer", "minimum": 1, "maximum": 10_000_000, "description": "FPL manager (entry) id"},
                "gameweek": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 38,
                    "description": "Gameweek number; defaults to the manager's current gameweek",
                },
            },
            "required": ["managerId"],
        },
    ),
]


async def dispatch(ctx: ToolContext, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """Run one tool call. Always returns an envelope, whatever goes wrong."""
    start = time.perf_counter()
    handler = HANDLERS.get(name)
    if handler is None:
        result = Failure(ErrorCode.VALIDATION_ERROR, f"Unknown tool: {name}", {"tool": name})
    else:
        logger.debug(f"Executing tool: {name} args={arguments}")
        try:
            result = await handler(ctx, arguments or {})
        except Exception as e:
            logger.error(f"Tool {name} failed", exc_info=True)
            result = internal_error(e, ctx.settings)

    duration_ms = round((time.perf_counter() - start) * 1000, 1)
    if isinstance(result, Failure):
        logger.info(f"Tool {name} returned {result.code.value} in {duration_ms}ms")
    else:
        logger.info(f"Tool {name} completed successfully in {duration_ms}ms")
    return render(result)


def build_server(ctx: ToolContext) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return TOOLS

    # Arguments are checked by our own validators so bad input still gets an error envelope.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        return await dispatch(ctx, name, arguments)

    return server


# --------------------
# Process lifecycle
# --------------------
def _hard_exit(exit_code: int) -> None:
    logging.shutdown()
    os._exit(exit_code)


class Lifecycle:
    """Signal and crash handling: log, wait a short grace period, then force exit."""

    def __init__(self, grace_seconds: float, exit_func: Callable[[int], Any] = _hard_exit):
        self.grace_seconds = grace_seconds
        self.shutting_down = False
        self._exit_func = exit_func

    def install(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.shutdown, 0, f"Received {sig.name}")
            except NotImplementedError:
                # Windows event loops have no signal handler support
                signal.signal(sig, lambda *_: loop.call_soon_threadsafe(self.shutdown, 0, "Interrupted"))
        loop.set_exception_handler(self._on_loop_exception)

    def _on_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        logger.error(f"Uncaught exception: {context.get('message')}", exc_info=exc)
        self.shutdown(1, "Uncaught exception")

    def shutdown(self, exit_code: int, reason: str = "") -> None:
        if self.shutting_down:
            logger.warning("Shutdown already in progress...")
            return
        self.shutting_down = True
        logger.info(f"{reason + '. ' if reason else ''}FPL query server shutting down...")
        asyncio.get_running_loop().call_later(self.grace_seconds, self._exit, exit_code)

    def _exit(self, exit_code: int) -> None:
        logger.info("Shutdown complete")
        self._exit_func(exit_code)


# --------------------
# Transports
# --------------------
async def run_stdio(settings: Settings) -> None:
    ctx = ToolContext.create(settings)
    lifecycle = Lifecycle(settings.shutdown_grace_seconds)
    lifecycle.install(asyncio.get_running_loop())
    server = build_server(ctx)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("FPL query server listening on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await ctx.aclose()


def create_app(ctx: ToolContext) -> Starlette:
    """Starlette app serving the MCP server over SSE."""
    server = build_server(ctx)
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
        return Response(status_code=204)

    async def health(_: Request) -> Response:
        return JSONResponse({"status": "ok", "server": SERVER_NAME, "tools": len(TOOLS)})

    @contextlib.asynccontextmanager
    async def lifespan(_: Starlette):
        yield
        await ctx.aclose()

    return Starlette(
        debug=not ctx.settings.is_production,
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/sse", handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ],
        lifespan=lifespan,
    )


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger.info(f"FPL query server v{__version__} initializing in {settings.environment} mode")
    logger.info(f"Registering {len(TOOLS)} tools: {', '.join(t.name for t in TOOLS)}")

    if settings.transport == "sse":
        app = create_app(ToolContext.create(settings))
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
        return

    try:
        asyncio.run(run_stdio(settings))
    except Exception:
        logger.exception("Fatal error in FPL query server")
        sys.exit(1)


if __name__ == "__main__":
    main()
