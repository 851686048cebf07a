"""Unified search use case.

Classifies the query, then either resolves a remote resource URL or runs the
eligible category searches (accounts, hashtags, statuses) concurrently. Status
results are privacy-filtered against the requester's relationships, loaded
in one batch per relation kind.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

from fedisearch.application.dtos.search import (
    ContentRow,
    ResolvedResource,
    SearchRequest,
    SearchResult,
)
from fedisearch.application.services.query_classifier import (
    CategorySearch,
    DirectResourceCandidate,
    categories_for,
    classify,
)
from fedisearch.application.services.status_filter import filter_statuses
from fedisearch.domain.enums import SearchCategory
from fedisearch.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

if TYPE_CHECKING:
    from fedisearch.application.interfaces.repositories import (
        IContentSearchBackend,
        IRelationshipRepository,
    )
    from fedisearch.application.interfaces.services import (
        IAccountSearchService,
        IHashtagSearchService,
        IUrlResolver,
    )
    from fedisearch.core.config import SearchScopeConfig

logger = logging.getLogger(__name__)


class SearchService:
    """Search across accounts, hashtags, and statuses for one requester."""

    def __init__(
        self,
        scope: "SearchScopeConfig",
        content_backend: "IContentSearchBackend",
        relationship_repo: "IRelationshipRepository",
        account_search: "IAccountSearchService",
        hashtag_search: "IHashtagSearchService",
        url_resolver: "IUrlResolver",
    ) -> None:
        self.scope = scope
        self.content_backend = content_backend
        self.relationship_repo = relationship_repo
        self.account_search = account_search
        self.hashtag_search = hashtag_search
        self.url_resolver = url_resolver

    @traced("search.perform")
    async def search(self, request: SearchRequest) -> SearchResult:
        """Run a search and return every category, empty where not searched.

        Args:
            request: Search request (query, requester, paging, refinements).

        Returns:
            SearchResult with accounts, hashtags, and statuses lists.

        Raises:
            GrammarError: Malformed operator syntax on the relational backend.
            BackendFatalError: Relational backend or relationship lookup failed.
        """
        results = SearchResult()
        if request.is_blank:
            return results

        add_span_attributes(
            **{
                "search.scope": self.scope.scope.value,
                "search.backend": self.scope.backend.value,
            }
        )
        classification = classify(request)
        if isinstance(classification, DirectResourceCandidate):
            resource = await self._resolve_url(request, classification)
            if resource is not None:
                add_span_attributes(**{"search.direct_resource": resource.kind.value})
                results[resource.category] = [resource.handle]
                return results
            classification = categories_for(request)

        await self._dispatch(request, classification, results)
        return results

    async def _resolve_url(
        self, request: SearchRequest, candidate: DirectResourceCandidate
    ) -> ResolvedResource | None:
        """Resolve once; None means fall back to keyword search."""
        resource = await self.url_resolver.resolve(
            candidate.url, on_behalf_of=request.account
        )
        if resource is None:
            logger.debug("URL query did not resolve; falling back to category search")
            return None
        category = resource.category
        if category is None or not request.allows(category):
            logger.debug(
                "Resolved %s does not match category restriction %s",
                resource.kind.value,
                request.category,
            )
            return None
        return resource

    async def _dispatch(
        self,
        request: SearchRequest,
        classification: CategorySearch,
        results: SearchResult,
    ) -> None:
        searches: dict[SearchCategory, Awaitable[list[Any]]] = {}
        if classification.accounts:
            searches[SearchCategory.ACCOUNTS] = self._search_accounts(request)
        if classification.hashtags:
            searches[SearchCategory.HASHTAGS] = self._search_hashtags(request)
        if classification.statuses:
            searches[SearchCategory.STATUSES] = self._search_statuses(request)
        add_span_attributes(
            **{"search.categories": ",".join(c.value for c in searches)}
        )
        if not searches:
            return

        # Every category runs to completion before a failure is surfaced.
        outcomes = await asyncio.gather(*searches.values(), return_exceptions=True)
        for category, outcome in zip(searches, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("%s search failed: %s", category.value, outcome)
                raise outcome
            results[category] = outcome

    async def _search_accounts(self, request: SearchRequest) -> list[Any]:
        return await self.account_search.search(
            request.query,
            request.account,
            limit=request.limit,
            offset=request.effective_offset,
            resolve=request.resolve,
        )

    async def _search_hashtags(self, request: SearchRequest) -> list[Any]:
        return await self.hashtag_search.search(
            request.query,
            limit=request.limit,
            offset=request.effective_offset,
            exclude_unreviewed=request.exclude_unreviewed,
        )

    async def _search_statuses(self, request: SearchRequest) -> list[ContentRow]:
        outcome = await self.content_backend.search(request)
        if outcome.is_degraded:
            logger.warning(
                "Status search degraded to empty (%s backend): %s",
                self.content_backend.name,
                outcome.degraded_reason,
            )
            add_span_event(
                "search.statuses.degraded",
                {"backend": self.content_backend.name, "reason": outcome.degraded_reason or ""},
            )
            return []
        if not outcome.rows:
            return []

        account = request.account
        relations = await self.relationship_repo.relations_map(
            account.id,
            {row.account_id for row in outcome.rows},
            {row.account_domain for row in outcome.rows},
        )
        return filter_statuses(outcome.rows, relations, account)
