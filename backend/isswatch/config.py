"""Runtime configuration read from the process environment (and .env)."""

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_N2YO_BASE = "https://api.n2yo.com/rest/v1"
DEFAULT_NOMINATIM_BASE = "https://nominatim.openstreetmap.org"


class Settings(BaseModel):
    n2yo_api_key: str | None = None
    port: int = 3000
    n2yo_base_url: str = DEFAULT_N2YO_BASE
    proxy_base: str = "http://localhost:3000"
    nominatim_base_url: str = DEFAULT_NOMINATIM_BASE
    user_agent: str = "isswatch/1.0"
    default_lat: float = 22.28552
    default_lon: float = 114.15769
    http_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        env = {
            "n2yo_api_key": os.getenv("N2YO_API_KEY"),
            "port": os.getenv("PORT"),
            "n2yo_base_url": os.getenv("N2YO_BASE_URL"),
            "proxy_base": os.getenv("ISSWATCH_PROXY_BASE"),
            "nominatim_base_url": os.getenv("NOMINATIM_BASE_URL"),
            "user_agent": os.getenv("ISSWATCH_USER_AGENT"),
            "default_lat": os.getenv("ISSWATCH_DEFAULT_LAT"),
            "default_lon": os.getenv("ISSWATCH_DEFAULT_LON"),
            "http_timeout": os.getenv("ISSWATCH_HTTP_TIMEOUT"),
        }
        # Unset and empty variables both fall back to the defaults
        return cls(**{k: v for k, v in env.items() if v})


@lru_cache
def get_settings() -> Settings:
    """Load .env once and return the process-wide settings.

    Also used as a FastAPI dependency so tests can override it.
    """
    load_dotenv()
    return Settings.from_env()
