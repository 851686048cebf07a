"""Composition root: build the active status backend and the search service.

The backend is chosen once from SearchScopeConfig; call sites only see the
IContentSearchBackend it returns. Account search, hashtag search, and URL
resolution are supplied by the host application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fedisearch.application.use_cases.search import SearchService
from fedisearch.core.config import SearchScopeConfig, Settings, get_settings
from fedisearch.domain.enums import SearchBackend
from fedisearch.domain.exceptions import SqlNotConfiguredException
from fedisearch.infrastructure.persistence.repositories.relationship_repo import (
    RelationshipRepository,
)
from fedisearch.infrastructure.search.index_backend import IndexContentSearchBackend
from fedisearch.infrastructure.search.index_client import SearchIndexClient
from fedisearch.infrastructure.search.null_backend import NullContentSearchBackend
from fedisearch.infrastructure.search.pg_backend import PostgresContentSearchBackend

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from fedisearch.application.interfaces.repositories import IContentSearchBackend
    from fedisearch.application.interfaces.services import (
        IAccountSearchService,
        IHashtagSearchService,
        IUrlResolver,
    )


def build_content_backend(
    scope: SearchScopeConfig,
    db: "AsyncSession | None" = None,
    index_client: SearchIndexClient | None = None,
) -> "IContentSearchBackend":
    """Return the single status backend selected by scope.backend.

    Raises:
        SqlNotConfiguredException: postgres backend without a session.
        ValueError: index backend without a client.
    """
    if scope.backend == SearchBackend.POSTGRES:
        if db is None:
            raise SqlNotConfiguredException()
        return PostgresContentSearchBackend(db, scope)
    if scope.backend == SearchBackend.INDEX:
        if index_client is None:
            raise ValueError("index backend requires a SearchIndexClient")
        return IndexContentSearchBackend(index_client, scope)
    return NullContentSearchBackend()


def build_search_service(
    db: "AsyncSession",
    account_search: "IAccountSearchService",
    hashtag_search: "IHashtagSearchService",
    url_resolver: "IUrlResolver",
    index_client: SearchIndexClient | None = None,
    settings: Settings | None = None,
) -> SearchService:
    """Wire a SearchService for one request scope (one database session).

    Args:
        db: Session used for relationship lookups and relational search.
        account_search: Account search collaborator.
        hashtag_search: Hashtag search collaborator.
        url_resolver: Remote resource resolver.
        index_client: Process-wide index client (index backend only).
        settings: Settings override; defaults to get_settings().
    """
    scope = (settings or get_settings()).search_scope_config()
    return SearchService(
        scope=scope,
        content_backend=build_content_backend(scope, db=db, index_client=index_client),
        relationship_repo=RelationshipRepository(db),
        account_search=account_search,
        hashtag_search=hashtag_search,
        url_resolver=url_resolver,
    )
