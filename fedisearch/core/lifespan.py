"""Process lifespan: startup and shutdown of search infrastructure.

Single place for startup/shutdown wiring (logging, telemetry, the shared
index HTTP client, SQL engine dispose). A host application enters
search_lifespan() once and passes runtime.index_client to
build_search_service() for each request.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fedisearch.core.config import SearchScopeConfig, Settings, get_settings
from fedisearch.domain.enums import SearchBackend
from fedisearch.infrastructure.search.index_client import SearchIndexClient
from fedisearch.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchRuntime:
    """Process-wide objects created at startup."""

    settings: Settings
    scope: SearchScopeConfig
    index_client: SearchIndexClient | None = None


@asynccontextmanager
async def search_lifespan(settings: Settings | None = None) -> AsyncIterator[SearchRuntime]:
    """Run startup then yield the runtime; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), index client (index
    backend only). Shutdown order: index client close, telemetry shutdown,
    SQL engine dispose.
    """
    settings = settings or get_settings()
    setup_logging(settings=settings)
    scope = settings.search_scope_config()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from fedisearch.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_httpx()
        set_telemetry(telemetry)
        logger.info("Telemetry initialized")

    index_client = None
    if scope.backend == SearchBackend.INDEX:
        index_client = SearchIndexClient.from_settings(settings)
        logger.info(
            "Status search via index %s/%s",
            settings.search_index_url,
            settings.search_index_name,
        )
    logger.info(
        "Search scope=%s backend=%s", scope.scope.value, scope.backend.value
    )

    try:
        yield SearchRuntime(settings=settings, scope=scope, index_client=index_client)
    finally:
        # ---- Shutdown ----
        if index_client is not None:
            await index_client.aclose()
            logger.info("Search index client closed")

        from fedisearch.shared.telemetry.telemetry import get_telemetry

        telemetry_instance = get_telemetry()
        if telemetry_instance is not None:
            telemetry_instance.shutdown()

        from fedisearch.infrastructure.persistence import database

        if getattr(database, "engine", None) is not None:
            await database.engine.dispose()
            logger.info("Database engine disposed")
