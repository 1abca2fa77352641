from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

CONFIG_PATH_ENV = "ANIME_PLANNER_CONFIG"
DEFAULT_ANILIST_URL = "https://graphql.anilist.co"


class Settings(BaseModel):
    """Application configuration resolved from env vars and optional TOML files."""

    anilist_url: str = Field(default=DEFAULT_ANILIST_URL, alias="ANILIST_URL")
    request_timeout: float = Field(default=20.0, gt=0, alias="ANILIST_TIMEOUT")

    catalog_page_size: int = Field(default=40, ge=1, le=50, alias="ANIME_PLANNER_CATALOG_SIZE")
    schedule_page_size: int = Field(default=50, ge=1, le=50, alias="ANIME_PLANNER_SCHEDULE_SIZE")
    trending_page_size: int = Field(default=18, ge=1, le=50, alias="ANIME_PLANNER_TRENDING_SIZE")

    # Plan defaults applied when a request omits a field
    episodes_per_day: int = Field(default=2, ge=1, alias="ANIME_PLANNER_EPISODES_PER_DAY")
    focus: Literal["score", "popularity"] = Field(default="score", alias="ANIME_PLANNER_FOCUS")
    include_completed: bool = Field(default=False, alias="ANIME_PLANNER_INCLUDE_COMPLETED")
    preferred_genres: list[str] = Field(default_factory=list, alias="ANIME_PLANNER_GENRES")

    # MCP Service Configuration
    mcp_host: str = Field(default="127.0.0.1", alias="MCP_HOST")
    mcp_port: int = Field(default=8092, alias="MCP_PORT")
    mcp_transport: Literal["stdio", "sse"] = Field(default="stdio", alias="MCP_TRANSPORT")

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    def require_anilist(self) -> None:
        """Ensure the AniList endpoint is usable."""
        if not self.anilist_url or not self.anilist_url.startswith(("http://", "https://")):
            raise SettingsError(
                f"Invalid ANILIST_URL {self.anilist_url!r}. Configure environment or TOML file.",
            )


class SettingsError(RuntimeError):
    """Raised when configuration cannot be resolved."""


@dataclass(frozen=True)
class SettingsLoadResult:
    settings: Settings
    source_path: Path | None


def load_settings(config_path: Path | None = None, *, load_env: bool = True) -> SettingsLoadResult:
    """Load settings from .env files, environment variables, and optional TOML configuration."""

    if load_env:
        load_dotenv()

    resolved_path = _determine_config_path(config_path)
    config_data: dict[str, Any] = {}

    if resolved_path and resolved_path.exists():
        try:
            with resolved_path.open("rb") as handle:
                toml_payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise SettingsError(f"Invalid TOML in {resolved_path}: {exc}") from exc
        try:
            config_data = _flatten_toml(toml_payload)
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"Invalid value in {resolved_path}: {exc}") from exc

    try:
        env_data = _collect_env_overrides()
    except ValueError as exc:
        raise SettingsError(f"Invalid environment override: {exc}") from exc
    merged = {**config_data, **env_data}

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as exc:  # pragma: no cover - surfaced via CLI messaging
        raise SettingsError(str(exc)) from exc

    return SettingsLoadResult(settings=settings, source_path=resolved_path)


def _determine_config_path(config_path: Path | None) -> Path | None:
    if config_path:
        return config_path

    env_override = os.getenv(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()

    default_path = Path.home() / ".config" / "anime-planner" / "config.toml"
    return default_path if default_path.exists() else None


def _split_genres(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(genre).strip() for genre in value if str(genre).strip()]
    if isinstance(value, str):
        return [genre.strip() for genre in value.split(",") if genre.strip()]
    return []


def _flatten_toml(payload: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}

    anilist_cfg = payload.get("anilist", {})
    if "url" in anilist_cfg:
        result["anilist_url"] = anilist_cfg.get("url")
    if "timeout" in anilist_cfg:
        result["request_timeout"] = float(anilist_cfg.get("timeout"))

    catalog_cfg = payload.get("catalog", {})
    if "catalog_size" in catalog_cfg:
        result["catalog_page_size"] = int(catalog_cfg.get("catalog_size"))
    if "schedule_size" in catalog_cfg:
        result["schedule_page_size"] = int(catalog_cfg.get("schedule_size"))
    if "trending_size" in catalog_cfg:
        result["trending_page_size"] = int(catalog_cfg.get("trending_size"))

    plan_cfg = payload.get("plan", {})
    if "episodes_per_day" in plan_cfg:
        result["episodes_per_day"] = int(plan_cfg.get("episodes_per_day"))
    if "focus" in plan_cfg:
        result["focus"] = plan_cfg.get("focus")
    if "include_completed" in plan_cfg:
        result["include_completed"] = bool(plan_cfg.get("include_completed"))
    if "genres" in plan_cfg:
        result["preferred_genres"] = _split_genres(plan_cfg.get("genres"))

    mcp_cfg = payload.get("mcp", {})
    if "host" in mcp_cfg:
        result["mcp_host"] = mcp_cfg.get("host")
    if "port" in mcp_cfg:
        result["mcp_port"] = int(mcp_cfg.get("port"))
    if "transport" in mcp_cfg:
        result["mcp_transport"] = mcp_cfg.get("transport")

    return result


def _collect_env_overrides() -> dict[str, Any]:
    mapping: dict[str, str] = {
        "ANILIST_URL": "anilist_url",
        "ANILIST_TIMEOUT": "request_timeout",
        "ANIME_PLANNER_CATALOG_SIZE": "catalog_page_size",
        "ANIME_PLANNER_SCHEDULE_SIZE": "schedule_page_size",
        "ANIME_PLANNER_TRENDING_SIZE": "trending_page_size",
        "ANIME_PLANNER_EPISODES_PER_DAY": "episodes_per_day",
        "ANIME_PLANNER_FOCUS": "focus",
        "ANIME_PLANNER_INCLUDE_COMPLETED": "include_completed",
        "ANIME_PLANNER_GENRES": "preferred_genres",
        "MCP_HOST": "mcp_host",
        "MCP_PORT": "mcp_port",
        "MCP_TRANSPORT": "mcp_transport",
    }

    result: dict[str, Any] = {}
    for env_name, field in mapping.items():
        if env_name not in os.environ:
            continue
        value = os.environ[env_name]
        if field in {"catalog_page_size", "schedule_page_size", "trending_page_size",
                     "episodes_per_day", "mcp_port"}:
            result[field] = int(value)
        elif field == "request_timeout":
            result[field] = float(value)
        elif field == "include_completed":
            result[field] = value.lower() in {"true", "1", "yes"}
        elif field == "preferred_genres":
            result[field] = _split_genres(value)
        else:
            result[field] = value
    return result


__all__ = ["Settings", "SettingsError", "SettingsLoadResult", "load_settings"]
