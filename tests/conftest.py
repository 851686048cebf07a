"""Pytest configuration and fixtures for fedisearch.

Unit tests use in-memory collaborators (AsyncMock) and need no services.
DB-dependent fixtures use fedisearch.infrastructure.persistence.database and
skip when DATABASE_URL is not configured.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fedisearch.application.dtos.search import ContentQueryResult, RelationshipMap
from fedisearch.application.use_cases.search import SearchService
from fedisearch.core.config import SearchScopeConfig
from fedisearch.domain.enums import SearchBackend, SearchScope
from fedisearch.infrastructure.persistence import database, models  # noqa: F401
from fedisearch.infrastructure.persistence.database import Base


@pytest.fixture
def actor() -> SimpleNamespace:
    """Requesting account (only id is used by the search core)."""
    return SimpleNamespace(id=1)


@pytest.fixture
def scope() -> SearchScopeConfig:
    return SearchScopeConfig(scope=SearchScope.PUBLIC, backend=SearchBackend.POSTGRES)


@pytest.fixture
def collaborators():
    """Mocked account search, hashtag search, URL resolver, status backend, relationship repo."""
    account_search = AsyncMock()
    account_search.search = AsyncMock(return_value=["account:alice"])
    hashtag_search = AsyncMock()
    hashtag_search.search = AsyncMock(return_value=["tag:fediverse"])
    url_resolver = AsyncMock()
    url_resolver.resolve = AsyncMock(return_value=None)
    content_backend = AsyncMock()
    content_backend.name = "postgres"
    content_backend.search = AsyncMock(return_value=ContentQueryResult.ok([]))
    relationship_repo = AsyncMock()
    relationship_repo.relations_map = AsyncMock(return_value=RelationshipMap())
    return SimpleNamespace(
        account_search=account_search,
        hashtag_search=hashtag_search,
        url_resolver=url_resolver,
        content_backend=content_backend,
        relationship_repo=relationship_repo,
    )


@pytest.fixture
def search_service(scope, collaborators) -> SearchService:
    """SearchService wired to the mocked collaborators."""
    return SearchService(
        scope=scope,
        content_backend=collaborators.content_backend,
        relationship_repo=collaborators.relationship_repo,
        account_search=collaborators.account_search,
        hashtag_search=collaborators.hashtag_search,
        url_resolver=collaborators.url_resolver,
    )


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (postgresql+asyncpg://...). Skips (pytest.skip)
    when Postgres is not configured. Use @pytest.mark.requires_db to mark
    tests that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL")
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
