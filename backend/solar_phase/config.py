"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings

# Resolve config: prefer system config (installed), fall back to repo .env (dev)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_SYSTEM_CONF = Path("/etc/solar-phase/solar-phase.conf")
_ENV_FILE = _SYSTEM_CONF if _SYSTEM_CONF.exists() else _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # Location (one fixed location per deployment)
    latitude: float = 38.8051095
    longitude: float = -77.0470229

    # Sunrise/sunset API
    sunrise_api_url: str = "https://api.sunrise-sunset.org/json"
    request_timeout: float = 10.0

    # Transient cache
    cache_key: str = "solar-phase-solar-time"
    cache_ttl_sec: int = 86400

    # Display
    local_timezone: str = "America/New_York"
    time_format: str = "%-m/%-d/%Y at %-I:%M%p"

    # Last.fm
    lastfm_api_url: str = "http://ws.audioscrobbler.com/2.0/"
    lastfm_api_key: str = ""
    lastfm_user: str = "ddkees"
    song_cache_key: str = "solar-phase-recent-song"
    song_cache_ttl_sec: int = 180

    # Database
    db_path: str = "solar_phase.db"

    @model_validator(mode="after")
    def _resolve_db_path(self) -> "Settings":
        """Make db_path absolute: relative to /var/lib/solar-phase if installed, else project root."""
        p = Path(self.db_path)
        if not p.is_absolute():
            if _ENV_FILE == _SYSTEM_CONF:
                self.db_path = str(Path("/var/lib/solar-phase") / p)
            else:
                self.db_path = str(_PROJECT_ROOT / p)
        return self

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_prefix": "SOLAR_PHASE_", "env_file": str(_ENV_FILE)}


settings = Settings()
