"""MCP (Model Context Protocol) server for anime-planner.

Exposes weekly planning, the airing schedule and the trending feed as tools.
"""

from anime_planner.mcp.server import create_mcp_server

__all__ = ["create_mcp_server"]
