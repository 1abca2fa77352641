#!/usr/bin/env python3
"""Quick live check against AniList.

Runs the three queries the planner depends on and prints a short summary, so
a changed upstream schema shows up before the MCP server or CLI is deployed.

Usage:
    python scripts/check_anilist_live.py
"""

import asyncio
import time

from anime_planner.clients.anilist import AniListClient, AniListError, current_season
from anime_planner.config import load_settings
from anime_planner.models import PlanOptions
from anime_planner.scheduling import build_plan, group_by_day


async def check_anilist() -> bool:
    settings = load_settings().settings
    season, year = current_season()
    print(f"Connecting to {settings.anilist_url} ({season} {year})")

    async with AniListClient(base_url=settings.anilist_url, timeout=settings.request_timeout) as client:
        print("\n1. seasonal_media...")
        try:
            catalog = await client.seasonal_media(season=season, season_year=year)
        except AniListError as e:
            print(f"   Error: {e}")
            return False
        plan = build_plan(catalog, PlanOptions())
        print(f"   {len(catalog)} titles, {sum(len(d.entries) for d in plan)} placed over {len(plan)} days")

        print("\n2. airing_schedules...")
        now = int(time.time())
        try:
            events = await client.airing_schedules(start=now, end=now + 7 * 86400)
        except AniListError as e:
            print(f"   Error: {e}")
            return False
        print(f"   {len(events)} airings across {len(group_by_day(events))} days")

        print("\n3. trending_media...")
        try:
            trending = await client.trending_media(per_page=5)
        except AniListError as e:
            print(f"   Error: {e}")
            return False
        for media in trending:
            print(f"   - {media.title_preferred}")

    print("\nAll AniList queries answered.")
    return True


if __name__ == "__main__":
    raise SystemExit(0 if asyncio.run(check_anilist()) else 1)
