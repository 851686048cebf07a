"""Status search backend used when full-text search is disabled."""

from __future__ import annotations

from fedisearch.application.dtos.search import ContentQueryResult, SearchRequest


class NullContentSearchBackend:
    """Always returns no statuses (implements IContentSearchBackend)."""

    name = "disabled"

    async def search(self, request: SearchRequest) -> ContentQueryResult:
        return ContentQueryResult.ok([])

    def build(self, category, parsed, scope, account, refinements, limit, offset) -> None:
        return None

    async def execute(self, query: None) -> ContentQueryResult:
        return ContentQueryResult.ok([])
