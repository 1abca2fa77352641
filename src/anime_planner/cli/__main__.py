from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import typer

from anime_planner import __version__
from anime_planner.clients.anilist import AniListClient, AniListError
from anime_planner.config import Settings, SettingsError, SettingsLoadResult, load_settings
from anime_planner.models import AutomationResult, PlanOptions, ScheduleResult, TrendingResult
from anime_planner.scheduling import InvalidArgumentError
from anime_planner.services import (
    AutomationService,
    ScheduleService,
    TrendingService,
    resolve_plan_options,
)

EXIT_CONFIG_ERROR = 1
EXIT_UPSTREAM_ERROR = 2
MCP_TRANSPORTS = ("stdio", "sse")

app = typer.Typer(
    add_completion=False,
    help="Plan a week of seasonal anime and browse the AniList airing schedule.",
)


@app.callback()
def _cli_entry(ctx: typer.Context) -> None:
    """Entrypoint for the anime-planner CLI."""
    ctx.obj = {} if ctx.obj is None else ctx.obj


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


@app.command()
def plan(
    genre: list[str] | None = typer.Option(
        None, "--genre", help="Preferred genre (repeat for several). Default: no filter."
    ),
    episodes_per_day: int | None = typer.Option(
        None, help="Episode quota for each weekday (default: 2)."
    ),
    focus: str | None = typer.Option(None, help="Ranking key: score or popularity."),
    include_completed: bool | None = typer.Option(
        None,
        "--include-completed/--exclude-completed",
        help="Keep titles that already finished airing.",
    ),
    json_output: bool = typer.Option(
        False, "--json/--no-json", help="Output as JSON for programmatic use."
    ),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Build a weekly viewing plan from the current season."""
    if debug:
        _setup_logging(logging.DEBUG)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)
    settings = load_result.settings

    request = {
        "preferred_genres": genre or None,
        "episodes_per_day": episodes_per_day,
        "focus": focus,
        "include_completed": include_completed,
    }
    try:
        settings.require_anilist()
        options = resolve_plan_options(request, settings)
    except (SettingsError, InvalidArgumentError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc

    try:
        result = asyncio.run(_run_plan(settings, options))
    except AniListError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_UPSTREAM_ERROR) from exc

    if json_output:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        _render_plan(result)


@app.command()
def schedule(
    json_output: bool = typer.Option(
        False, "--json/--no-json", help="Output as JSON for programmatic use."
    ),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Show episodes airing over the next seven days, grouped by UTC date."""
    if debug:
        _setup_logging(logging.DEBUG)

    settings = _require_settings()
    try:
        result = asyncio.run(_run_schedule(settings))
    except AniListError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_UPSTREAM_ERROR) from exc

    if json_output:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        _render_schedule(result)


@app.command()
def trending(
    limit: int | None = typer.Option(None, min=1, max=50, help="Number of titles (default: 18)."),
    json_output: bool = typer.Option(
        False, "--json/--no-json", help="Output as JSON for programmatic use."
    ),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """List the anime currently trending on AniList."""
    if debug:
        _setup_logging(logging.DEBUG)

    settings = _require_settings()
    try:
        result = asyncio.run(_run_trending(settings, limit))
    except AniListError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_UPSTREAM_ERROR) from exc

    if json_output:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
        return

    if not result.items:
        typer.secho("Nothing trending right now.", fg=typer.colors.YELLOW)
        return
    typer.secho(f"Trending on AniList ({len(result.items)})", fg=typer.colors.CYAN)
    for idx, media in enumerate(result.items, start=1):
        score = f"{media.average_score:g}" if media.average_score is not None else "n/a"
        typer.echo(f"{idx}. {media.title_preferred} (score: {score})")
        if media.genres:
            typer.echo(f"   genres: {', '.join(media.genres)}")


@app.command()
def config(show_sources: bool = typer.Option(False, help="Display where settings came from.")) -> None:
    """Describe configuration expectations."""
    load_result = _safe_load_settings(load_even_if_missing=True)
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    settings = load_result.settings
    values: dict[str, Any] = {
        "anilist_url": settings.anilist_url,
        "request_timeout": settings.request_timeout,
        "catalog_page_size": settings.catalog_page_size,
        "schedule_page_size": settings.schedule_page_size,
        "trending_page_size": settings.trending_page_size,
        "episodes_per_day": settings.episodes_per_day,
        "focus": settings.focus,
        "include_completed": settings.include_completed,
        "preferred_genres": settings.preferred_genres or [],
        "mcp_transport": settings.mcp_transport,
    }

    for key, value in values.items():
        typer.echo(f"{key}: {value}")

    if show_sources:
        source_hint = load_result.source_path or "<env/.env>"
        typer.echo(f"resolved_from: {source_hint}")
        typer.echo(
            "Configure ~/.config/anime-planner/config.toml for persistent settings.",
        )


@app.command()
def serve(
    host: str | None = typer.Option(
        None, help="Host to bind MCP server (default: MCP_HOST or 127.0.0.1)"
    ),
    port: int | None = typer.Option(
        None, help="Port to bind MCP server (default: MCP_PORT or 8092)"
    ),
    transport: str | None = typer.Option(
        None, help="Transport: stdio or sse (default: MCP_TRANSPORT or stdio)"
    ),
    debug: bool = typer.Option(False, help="Enable debug logging"),
) -> None:
    """Run anime-planner as an MCP service for AI agents.

    Transport modes:
    - stdio: Process communication via stdin/stdout
    - sse: HTTP/SSE server on network
      Endpoints: /mcp/sse (SSE stream), /mcp/messages (POST)

    Tools available: build_plan, airing_schedule, trending_anime
    """
    if debug:
        _setup_logging(logging.DEBUG)
        logging.getLogger("mcp").setLevel(logging.DEBUG)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    settings = load_result.settings

    final_host = host if host is not None else settings.mcp_host
    final_port = port if port is not None else settings.mcp_port
    final_transport = transport if transport is not None else settings.mcp_transport
    if final_transport not in MCP_TRANSPORTS:
        typer.secho(
            f"Unknown transport {final_transport!r}; expected one of: {', '.join(MCP_TRANSPORTS)}",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    from anime_planner.mcp.server import TOOL_NAMES, run_mcp_http_server, run_mcp_server

    if final_transport == "sse":
        typer.secho(
            f"Starting MCP HTTP/SSE server on http://{final_host}:{final_port}...",
            fg=typer.colors.GREEN,
        )
    else:
        typer.secho("Starting MCP stdio server...", fg=typer.colors.GREEN)

    typer.echo(f"Available tools: {', '.join(TOOL_NAMES)}")
    typer.echo("Press Ctrl+C to stop")

    try:
        if final_transport == "sse":
            asyncio.run(run_mcp_http_server(settings, final_host, final_port))
        else:
            asyncio.run(run_mcp_server(settings))
    except KeyboardInterrupt:
        typer.echo("\nMCP server stopped")


def main() -> None:
    """Expose Typer app for the console script."""
    app()


def format_time_until(seconds: int | None) -> str:
    """Compact countdown: Now, hours below a day, then whole days."""
    if seconds is None or seconds < 0:
        return "Now"
    hours = seconds // 3600
    if hours < 24:
        return f"{hours}h"
    return f"{hours // 24}d"


async def _run_plan(settings: Settings, options: PlanOptions) -> AutomationResult:
    async with AniListClient(base_url=settings.anilist_url, timeout=settings.request_timeout) as client:
        service = AutomationService(client, per_page=settings.catalog_page_size)
        return await service.build(options)


async def _run_schedule(settings: Settings) -> ScheduleResult:
    async with AniListClient(base_url=settings.anilist_url, timeout=settings.request_timeout) as client:
        service = ScheduleService(client, per_page=settings.schedule_page_size)
        return await service.upcoming()


async def _run_trending(settings: Settings, limit: int | None) -> TrendingResult:
    async with AniListClient(base_url=settings.anilist_url, timeout=settings.request_timeout) as client:
        service = TrendingService(client, per_page=settings.trending_page_size)
        return await service.trending(limit=limit)


def _require_settings() -> Settings:
    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)
    settings = load_result.settings
    try:
        settings.require_anilist()
    except SettingsError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc
    return settings


def _safe_load_settings(load_even_if_missing: bool = False) -> SettingsLoadResult | None:
    try:
        return load_settings()
    except SettingsError as exc:
        if load_even_if_missing:
            typer.secho(
                f"Warning: configuration incomplete – {exc}",
                fg=typer.colors.YELLOW,
            )
            return SettingsLoadResult(settings=Settings(), source_path=None)
        typer.secho(str(exc), fg=typer.colors.RED)
        return None


def _setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for debug mode."""
    logging.basicConfig(
        format="%(message)s",
        level=level,
        force=True,
    )


def _render_plan(result: AutomationResult) -> None:
    filters = result.filters
    genres = ", ".join(filters.preferred_genres) or "any"
    typer.secho(
        f"Weekly plan (focus: {filters.focus}, {filters.episodes_per_day} ep/day, genres: {genres})",
        fg=typer.colors.CYAN,
    )
    if not result.plan:
        typer.secho("No titles could be scheduled.", fg=typer.colors.YELLOW)
        return

    for day_plan in result.plan:
        typer.secho(f"{day_plan.day} ({day_plan.total_episodes} ep)", bold=True)
        for entry in day_plan.entries:
            score = f"{entry.average_score:g}" if entry.average_score is not None else "n/a"
            typer.echo(f"  - {entry.title}: {entry.episodes_assigned} ep (score: {score})")

    placed = sum(len(day_plan.entries) for day_plan in result.plan)
    typer.echo(f"Scheduled {placed} of {result.source_total} catalog titles.")


def _render_schedule(result: ScheduleResult) -> None:
    if not result.grouped:
        typer.secho("No episodes airing in the next week.", fg=typer.colors.YELLOW)
        return

    typer.secho(f"Airing schedule ({result.total} episodes)", fg=typer.colors.CYAN)
    for day, events in result.grouped.items():
        weekday = datetime.fromisoformat(day).strftime("%A")
        typer.secho(f"{day} {weekday}", bold=True)
        for event in events:
            airing = datetime.fromtimestamp(event.airing_at, tz=timezone.utc).strftime("%H:%M")
            typer.echo(
                f"  {airing} UTC  {event.title} ep {event.episode or '?'}"
                f"  (in {format_time_until(event.time_until_airing)})"
            )


if __name__ == "__main__":
    main()
