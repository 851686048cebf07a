"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Search scope and the active content-search backend are
read once at startup and frozen into a SearchScopeConfig that components
receive explicitly.
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fedisearch.domain.enums import SearchBackend, SearchScope


@dataclass(frozen=True)
class SearchScopeConfig:
    """Process-wide search policy: visibility tier and active backend.

    Built once from Settings; immutable thereafter.
    """

    scope: SearchScope = SearchScope.CLASSIC
    backend: SearchBackend = SearchBackend.DISABLED


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_backend_requirements (database_url for the postgres backend,
    search_index_url for the index backend).
    """

    # App
    app_name: str = "fedisearch"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (relational full-text backend and relationship lookups)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Search policy. SEARCH_SCOPE: classic (owner-only) | public | public_or_unlisted.
    search_scope: SearchScope = SearchScope.CLASSIC
    # SEARCH_BACKEND: postgres | index | disabled
    search_backend: SearchBackend = SearchBackend.DISABLED
    # Legacy switch; when true it forces the postgres backend.
    pg_full_text_search_enabled: bool = False

    # Document index (Elasticsearch/OpenSearch-compatible _search API)
    search_index_url: str = ""
    search_index_name: str = "statuses"
    search_index_api_key: SecretStr | None = None
    search_index_timeout_seconds: float = 5.0

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("search_scope", mode="before")
    @classmethod
    def coerce_search_scope(cls, value: object) -> object:
        """Unknown SEARCH_SCOPE values fall back to classic (owner-only)."""
        if isinstance(value, SearchScope):
            return value
        if isinstance(value, str) and value.strip().lower() in SearchScope.values():
            return value.strip().lower()
        return SearchScope.CLASSIC

    @model_validator(mode="after")
    def validate_backend_requirements(self) -> "Settings":
        """Validate settings required by the active search backend.

        - postgres (or PG_FULL_TEXT_SEARCH_ENABLED=true): DATABASE_URL required.
        - index: SEARCH_INDEX_URL required.
        """
        if self.pg_full_text_search_enabled:
            self.search_backend = SearchBackend.POSTGRES
        if self.search_backend == SearchBackend.POSTGRES and not self.database_url:
            raise ValueError(
                "DATABASE_URL is required when search_backend is 'postgres'. "
                "Set in environment or .env file."
            )
        if self.search_backend == SearchBackend.INDEX and not self.search_index_url:
            raise ValueError(
                "SEARCH_INDEX_URL is required when search_backend is 'index' "
                "(e.g. http://localhost:9200)."
            )
        if self.search_index_timeout_seconds <= 0:
            raise ValueError("search_index_timeout_seconds must be positive")
        return self

    def search_scope_config(self) -> SearchScopeConfig:
        """Return the immutable search policy derived from these settings."""
        return SearchScopeConfig(scope=self.search_scope, backend=self.search_backend)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
