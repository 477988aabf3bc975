"""
Configuration for the invoicing dashboard backend.

Settings are read once from the process environment, after python-dotenv
has merged any local .env file into it. Pass an explicit mapping to
Settings() to build an isolated instance (tests do this).

Variables:
    SUPABASE_URL              Project URL, e.g. https://<project-id>.supabase.co
    SUPABASE_PUBLISHABLE_KEY  Key used for sign-in and per-user clients
    SESSION_COOKIE_NAME       Cookie carrying the access token after /login
    ROUTE_CACHE_MAX_ENTRIES   (client, route) snapshots kept in memory
    ENVIRONMENT               development | testing | staging | production
    LOG_LEVEL                 Standard logging level name
    CORS_ORIGINS              Comma-separated origins allowed in production
"""
import logging
import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
REQUIRED = ("SUPABASE_URL", "SUPABASE_PUBLISHABLE_KEY")
DEFAULT_CACHE_ENTRIES = 1024


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _positive_int(raw: str) -> Optional[int]:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 1 else None


class Settings:
    """Invoicing backend settings."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        env = os.environ if environ is None else environ

        self.SUPABASE_URL: str = env.get("SUPABASE_URL", "").strip().rstrip("/")
        self.SUPABASE_PUBLISHABLE_KEY: str = env.get("SUPABASE_PUBLISHABLE_KEY", "").strip()

        self.SESSION_COOKIE_NAME: str = env.get("SESSION_COOKIE_NAME", "session-token")
        self._cache_entries_raw = env.get("ROUTE_CACHE_MAX_ENTRIES", str(DEFAULT_CACHE_ENTRIES))

        self.ENVIRONMENT: str = env.get("ENVIRONMENT", "development").strip().lower()
        self.LOG_LEVEL: str = env.get("LOG_LEVEL", "INFO").strip().upper()
        self.CORS_ORIGINS: List[str] = _split_origins(
            env.get("CORS_ORIGINS", "http://localhost:3000")
        )

    @property
    def SUPABASE_JWKS_URL(self) -> str:
        """JWKS endpoint of the project's auth server, empty when unconfigured."""
        if not self.SUPABASE_URL:
            return ""
        return f"{self.SUPABASE_URL}/auth/v1/.well-known/jwks.json"

    @property
    def ROUTE_CACHE_MAX_ENTRIES(self) -> int:
        """Configured bound, or the default when it is not a positive integer."""
        entries = _positive_int(self._cache_entries_raw)
        return DEFAULT_CACHE_ENTRIES if entries is None else entries

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging constant; unknown names fall back to INFO."""
        if self.LOG_LEVEL in LOG_LEVELS:
            return getattr(logging, self.LOG_LEVEL)
        return logging.INFO

    def problems(self) -> List[str]:
        """Every configuration problem found, as readable sentences."""
        found = [f"{name} is not set" for name in REQUIRED if not getattr(self, name)]

        if self.SUPABASE_URL and not self.SUPABASE_URL.startswith(("http://", "https://")):
            found.append("SUPABASE_URL must be an http(s) URL")
        if self.LOG_LEVEL not in LOG_LEVELS:
            found.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        if _positive_int(self._cache_entries_raw) is None:
            found.append("ROUTE_CACHE_MAX_ENTRIES must be a positive integer")
        if self.is_production() and not self.CORS_ORIGINS:
            found.append("CORS_ORIGINS must list at least one origin in production")

        return found

    def validate(self) -> None:
        """
        Raise if the configuration cannot run the service.

        Raises:
            ValueError: Listing every problem found, not just the first.
        """
        found = self.problems()
        if found:
            raise ValueError(
                f"Invalid configuration: {'; '.join(found)}. Please check your .env file."
            )

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


settings = Settings()

# Fail fast on a misconfigured deployment; development only warns.
# Tests set VALIDATE_CONFIG=false before importing the app.
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        if not settings.is_development():
            raise
        logger.warning(f"{e} The app may not work correctly until it is configured.")
