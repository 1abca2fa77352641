"""MCP server implementation with anime-planner tools."""

import asyncio
import logging
from typing import Any

import uvicorn
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import BaseModel, ValidationError

from anime_planner.clients.anilist import AniListClient, AniListError
from anime_planner.config.settings import Settings, load_settings
from anime_planner.mcp.schemas import (
    AiringScheduleParams,
    AiringScheduleResponse,
    BuildPlanParams,
    BuildPlanResponse,
    PlanDay,
    TrendingAnime,
    TrendingParams,
    TrendingResponse,
)
from anime_planner.scheduling import InvalidArgumentError
from anime_planner.services import (
    AutomationService,
    ScheduleService,
    TrendingService,
    resolve_plan_options,
)

logger = logging.getLogger(__name__)

TOOL_NAMES = ("build_plan", "airing_schedule", "trending_anime")


def _text(response: BaseModel) -> list[TextContent]:
    return [TextContent(type="text", text=response.model_dump_json(indent=2))]


def create_mcp_server(settings: Settings | None = None) -> Server:
    """Create and configure the MCP server with all tools."""
    server = Server("anime-planner")

    # Load settings once at startup from .env and config files
    if settings is None:
        settings = load_settings().settings

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available tools."""
        return [
            Tool(
                name="build_plan",
                description=(
                    "Build a weekly viewing plan from this season's anime. "
                    "Titles are ranked by score or popularity and spread across "
                    "Monday to Sunday under a per-day episode quota."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "preferred_genres": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Only consider these genres (optional)",
                        },
                        "episodes_per_day": {
                            "type": "integer",
                            "description": "Episode quota per day",
                            "minimum": 1,
                        },
                        "focus": {
                            "type": "string",
                            "enum": ["score", "popularity"],
                            "description": "Ranking key",
                        },
                        "include_completed": {
                            "type": "boolean",
                            "description": "Keep titles that already finished airing",
                        },
                    },
                },
            ),
            Tool(
                name="airing_schedule",
                description=(
                    "List episodes airing in the coming days, grouped by UTC calendar date."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "window_days": {
                            "type": "integer",
                            "description": "Days to look ahead",
                            "default": 7,
                            "minimum": 1,
                            "maximum": 14,
                        },
                    },
                },
            ),
            Tool(
                name="trending_anime",
                description="List the anime currently trending on AniList.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "limit": {
                            "type": "integer",
                            "description": "Number of titles",
                            "default": 18,
                            "minimum": 1,
                            "maximum": 50,
                        },
                    },
                },
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        logger.info(f"Processing tool call: {name} with arguments: {arguments}")

        if name == "build_plan":
            result = await _build_plan(settings, arguments)
        elif name == "airing_schedule":
            result = await _airing_schedule(settings, arguments)
        elif name == "trending_anime":
            result = await _trending_anime(settings, arguments)
        else:
            raise ValueError(f"Unknown tool: {name}")

        logger.info(f"Tool call {name} completed. Returning {len(result)} TextContent items")
        return result

    return server


async def _build_plan(settings: Settings, arguments: dict[str, Any]) -> list[TextContent]:
    """Build a weekly plan from the seasonal catalog."""
    try:
        params = BuildPlanParams(**(arguments or {}))
        options = resolve_plan_options(params.model_dump(exclude_none=True), settings)
    except (ValidationError, InvalidArgumentError) as exc:
        return _text(BuildPlanResponse(success=False, error="invalid_input", message=str(exc)))

    async with AniListClient(
        base_url=settings.anilist_url,
        timeout=settings.request_timeout,
    ) as client:
        service = AutomationService(client, per_page=settings.catalog_page_size)
        try:
            result = await service.build(options)
        except AniListError as exc:
            logger.warning(f"AniList failure while building plan: {exc}")
            return _text(BuildPlanResponse(success=False, error="upstream_error", message=str(exc)))

    days = [
        PlanDay(
            day=day_plan.day,
            total_episodes=day_plan.total_episodes,
            titles=[entry.title for entry in day_plan.entries],
        )
        for day_plan in result.plan
    ]
    placed = sum(len(day.titles) for day in days)
    response = BuildPlanResponse(
        success=True,
        message=f"Planned {placed} of {result.source_total} titles across {len(days)} days",
        days=days,
        plan=[day_plan.model_dump(by_alias=True) for day_plan in result.plan],
        source_total=result.source_total,
        filters=result.filters.model_dump(by_alias=True),
    )
    return _text(response)


async def _airing_schedule(settings: Settings, arguments: dict[str, Any]) -> list[TextContent]:
    """Group upcoming airings by day."""
    try:
        params = AiringScheduleParams(**(arguments or {}))
    except ValidationError as exc:
        return _text(AiringScheduleResponse(success=False, error="invalid_input", message=str(exc)))

    async with AniListClient(
        base_url=settings.anilist_url,
        timeout=settings.request_timeout,
    ) as client:
        service = ScheduleService(
            client,
            per_page=settings.schedule_page_size,
            window_days=params.window_days,
        )
        try:
            result = await service.upcoming()
        except AniListError as exc:
            logger.warning(f"AniList failure while loading schedule: {exc}")
            return _text(
                AiringScheduleResponse(success=False, error="upstream_error", message=str(exc))
            )

    grouped = {
        day: [event.model_dump(by_alias=True) for event in events]
        for day, events in result.grouped.items()
    }
    response = AiringScheduleResponse(
        success=True,
        message=f"{result.total} episodes airing over {len(grouped)} days",
        total=result.total,
        grouped=grouped,
    )
    return _text(response)


async def _trending_anime(settings: Settings, arguments: dict[str, Any]) -> list[TextContent]:
    """Return the trending feed."""
    try:
        params = TrendingParams(**(arguments or {}))
    except ValidationError as exc:
        return _text(TrendingResponse(success=False, error="invalid_input", message=str(exc)))

    async with AniListClient(
        base_url=settings.anilist_url,
        timeout=settings.request_timeout,
    ) as client:
        service = TrendingService(client, per_page=settings.trending_page_size)
        try:
            result = await service.trending(limit=params.limit)
        except AniListError as exc:
            logger.warning(f"AniList failure while loading trending: {exc}")
            return _text(TrendingResponse(success=False, error="upstream_error", message=str(exc)))

    items = [
        TrendingAnime(
            id=media.id,
            title=media.title_preferred,
            average_score=media.average_score,
            popularity=media.popularity,
            genres=list(media.genres),
        )
        for media in result.items
    ]
    return _text(
        TrendingResponse(
            success=True,
            message=f"Found {len(items)} trending titles",
            items=items,
            count=len(items),
        )
    )


async def run_mcp_server(settings: Settings) -> None:
    """Run the MCP server with stdio transport."""
    server = create_mcp_server(settings)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def run_mcp_http_server(settings: Settings, host: str, port: int) -> None:
    """Run the MCP server with HTTP/SSE transport."""
    server = create_mcp_server(settings)
    sse = SseServerTransport("/mcp/messages")

    async def app(scope, receive, send):
        """Raw ASGI application for MCP SSE transport."""
        if scope["type"] != "http":
            return

        path = scope["path"]
        method = scope["method"]
        logger.debug(f"Received {method} request to {path}")

        if path == "/mcp/sse":
            logger.info(f"Opening SSE connection from {scope.get('client', ['unknown'])[0]}")
            async with sse.connect_sse(scope, receive, send) as streams:
                await server.run(streams[0], streams[1], server.create_initialization_options())
                logger.info("MCP server.run() completed")

        elif path == "/mcp/messages" and method == "POST":
            await sse.handle_post_message(scope, receive, send)

        else:
            logger.warning(f"404 for {method} {path}")
            await send(
                {
                    "type": "http.response.start",
                    "status": 404,
                    "headers": [[b"content-type", b"text/plain"]],
                }
            )
            await send({"type": "http.response.body", "body": b"Not Found"})

    config = uvicorn.Config(app, host=host, port=port, log_level="info")
    server_instance = uvicorn.Server(config)
    await server_instance.serve()


def main() -> None:
    """Entry point for MCP server."""
    settings = load_settings().settings
    asyncio.run(run_mcp_server(settings))


if __name__ == "__main__":
    main()
