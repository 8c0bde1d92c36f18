"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources, highest priority first:

  1. Environment variables, e.g. ``CACHE_TTL_SECONDS=10``
  2. A ``.env`` file in the working directory (local development)

Field names map to upper-cased env var names.  Defaults apply when neither
source sets a value.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """blogfeed application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Upstream post provider ===
    posts_api_base_url: str = "https://api.hatchways.io"
    posts_api_path: str = "/assessment/blog/posts"
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # === Aggregation ===
    # A cached tag is served without a round trip while younger than this.
    cache_ttl_seconds: float = Field(default=5.0, gt=0)
    # 0 disables the limit.
    fetch_timeout_seconds: float = Field(default=10.0, ge=0)
    aggregate_deadline_seconds: float = Field(default=30.0, ge=0)
    max_concurrent_fetches: int = Field(default=0, ge=0)

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8080
    app_env: str = "development"
    log_level: str = "INFO"
    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def posts_url(self) -> str:
        """Full URL of the upstream posts endpoint."""
        return self.posts_api_base_url.rstrip("/") + "/" + self.posts_api_path.lstrip("/")
