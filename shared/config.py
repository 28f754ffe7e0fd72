"""
Centralized configuration for the activity proxy.

All settings are loaded from environment variables with sensible defaults.
Spotify credentials use the SPOTIFY_* names shared by every hosting platform.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Spotify Activity Proxy"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "production"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings (main API only, the worker sets its own headers)
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET"]
    cors_allow_headers: list[str] = ["*"]

    # Spotify credentials
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_refresh_token: str = ""

    # Spotify endpoints
    spotify_token_url: str = "https://accounts.spotify.com/api/token"
    spotify_authorize_url: str = "https://accounts.spotify.com/authorize"
    spotify_api_base_url: str = "https://api.spotify.com/v1"
    spotify_timeout_seconds: float = 10.0
    spotify_redirect_uri: str = "http://127.0.0.1:8888/callback"

    # Cache-Control max-age per hosting platform (seconds)
    server_cache_max_age: int = 60
    netlify_cache_max_age: int = 300
    worker_cache_max_age: int = 60

    @property
    def is_development(self) -> bool:
        """Whether error bodies may include stack traces."""
        return self.environment.strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.
    """
    return Settings()
