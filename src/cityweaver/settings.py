"""
cityweaver.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the providers, the enrichment
  components and the API surface.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    - Strict env-driven configuration (prefix `CITYWEAVER_`)
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="CITYWEAVER_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "cityweaver-enrichment"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Geocoding (Nominatim-compatible search endpoint)
    geocoding_base_url: str = "https://nominatim.openstreetmap.org"
    geocoding_user_agent: str = "cityweaver-enrichment/0.1"
    search_debounce_ms: int = Field(default=300, ge=0)
    search_min_query_length: int = Field(default=2, ge=1)
    search_result_limit: int = Field(default=5, ge=1)

    # Routes + personas back end
    provider_api_base_url: str = "http://localhost:8080"
    provider_api_token: str | None = Field(default=None, repr=False)
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    http_retry_attempts: int = Field(default=3, ge=1)
    http_retry_delay_seconds: float = Field(default=1.0, ge=0)

    # Persona enrichment
    persona_strategy: Literal["batch", "fanout"] = "batch"
    persona_fanout_concurrency: int = Field(default=4, ge=1)

    # Route provider calls in-process to `/internal/v1/*` instead of a real back end.
    use_dummy_providers: bool = True

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every component receives the values it needs explicitly; only the API layer
# reads the cached instance.
