"""Application DTOs (no ORM dependency)."""

from fedisearch.application.dtos.search import (
    ContentQueryResult,
    ContentRow,
    RelationshipMap,
    ResolvedResource,
    SearchRequest,
    SearchResult,
    StatusRefinements,
)

__all__ = [
    "ContentQueryResult",
    "ContentRow",
    "RelationshipMap",
    "ResolvedResource",
    "SearchRequest",
    "SearchResult",
    "StatusRefinements",
]
