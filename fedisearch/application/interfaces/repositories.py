"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fedisearch.application.dtos.search import (
        Actor,
        ContentQueryResult,
        RelationshipMap,
        SearchRequest,
        StatusRefinements,
    )
    from fedisearch.application.services.query_parser import ParsedQuery
    from fedisearch.core.config import SearchScopeConfig
    from fedisearch.domain.enums import SearchCategory


class IContentSearchBackend(Protocol):
    """Protocol for a status full-text backend (relational or document index).

    Both implementations return rows shaped identically (ContentRow, in
    backend relevance order) so post-processing is backend-agnostic.
    """

    name: str

    def build(
        self,
        category: SearchCategory,
        parsed: ParsedQuery,
        scope: SearchScopeConfig,
        account: Actor,
        refinements: StatusRefinements,
        limit: int,
        offset: int,
    ) -> Any:
        """Translate a parsed query into a backend-native query object."""

    async def execute(self, query: Any) -> ContentQueryResult:
        """Run a built query. Recoverable failures yield a degraded result."""

    async def search(self, request: SearchRequest) -> ContentQueryResult:
        """Parse, build, and execute a status search for the request."""


class IRelationshipRepository(Protocol):
    """Protocol for batched relationship lookups (DIP)."""

    async def relations_map(
        self,
        account_id: int,
        account_ids: Iterable[int],
        domains: Iterable[str | None],
    ) -> RelationshipMap:
        """Return block/mute/follow/domain-block relations for the candidates (one lookup per kind)."""
