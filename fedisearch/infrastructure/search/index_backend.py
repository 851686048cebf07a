"""Document-index status search (implements IContentSearchBackend).

Builds a bool query for an Elasticsearch/OpenSearch statuses index. Indexed
documents carry: id, account_id, account_domain, account_acct, text,
spoiler_text, visibility, searchable_by (ids allowed to search the status
privately), properties (reply, sensitive, media, poll, link, ...), language,
created_at.

Index failures degrade status search to empty instead of failing the call.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fedisearch.application.dtos.search import (
    Actor,
    ContentQueryResult,
    ContentRow,
    SearchRequest,
    StatusRefinements,
)
from fedisearch.application.services.query_parser import OperatorTerm, ParsedQuery, parse
from fedisearch.core.config import SearchScopeConfig
from fedisearch.domain.enums import SCOPE_VISIBILITIES, SearchCategory, SearchScope
from fedisearch.domain.exceptions import BackendConnectivityError, GrammarError
from fedisearch.infrastructure.search.index_client import SearchIndexClient
from fedisearch.shared.telemetry.tracing import traced
from fedisearch.shared.utils.datetime import day_bounds_utc, start_of_day_utc

logger = logging.getLogger(__name__)

TEXT_FIELDS = ["text", "spoiler_text"]
SOURCE_FIELDS = ["id", "account_id", "account_domain"]


class IndexContentSearchBackend:
    """Status search against the document index."""

    name = "index"

    def __init__(self, client: SearchIndexClient, scope: SearchScopeConfig) -> None:
        self.client = client
        self.scope = scope

    async def search(self, request: SearchRequest) -> ContentQueryResult:
        """Parse, build, and execute. Malformed query syntax degrades to empty."""
        try:
            parsed = parse(request.query)
        except GrammarError as e:
            return ContentQueryResult.degraded(f"query syntax: {e.message}")
        if not parsed.terms:
            # Nothing to match on (e.g. '""'); never fall back to match-all.
            return ContentQueryResult.ok([])
        body = self.build(
            SearchCategory.STATUSES,
            parsed,
            self.scope,
            request.account,
            StatusRefinements.from_request(request),
            request.limit,
            request.effective_offset,
        )
        return await self.execute(body)

    def build(
        self,
        category: SearchCategory,
        parsed: ParsedQuery,
        scope: SearchScopeConfig,
        account: Actor,
        refinements: StatusRefinements,
        limit: int,
        offset: int,
    ) -> dict[str, Any]:
        """Build the _search request body for one page of statuses."""
        if category is not SearchCategory.STATUSES:
            raise ValueError(f"Index backend only searches statuses, got {category!r}")

        library_only = any(t.value == "library" for t in parsed.operators_for("in"))
        filters: list[dict[str, Any]] = [
            self._scope_clause(scope.scope, account, library_only)
        ]
        must: list[dict[str, Any]] = []
        must_not: list[dict[str, Any]] = []

        if parsed.has_text:
            must.append(
                {
                    "simple_query_string": {
                        "query": parsed.text,
                        "fields": TEXT_FIELDS,
                        "default_operator": "and",
                    }
                }
            )

        for term in parsed.operators:
            clause = self._operator_clause(term, account)
            if clause is None:
                continue
            (must_not if term.negated else filters).append(clause)

        if refinements.account_id is not None:
            filters.append({"term": {"account_id": int(refinements.account_id)}})
        if refinements.min_id is not None or refinements.max_id is not None:
            id_range: dict[str, int] = {}
            if refinements.min_id is not None:
                id_range["gt"] = int(refinements.min_id)
            if refinements.max_id is not None:
                id_range["lt"] = int(refinements.max_id)
            filters.append({"range": {"id": id_range}})

        bool_query: dict[str, Any] = {"filter": filters}
        if must:
            bool_query["must"] = must
        if must_not:
            bool_query["must_not"] = must_not
        body: dict[str, Any] = {
            "query": {"bool": bool_query},
            "from": offset,
            "size": limit,
            "_source": SOURCE_FIELDS,
        }
        if not must:
            body["sort"] = [{"id": {"order": "desc"}}]
        return body

    @traced("search.statuses.index")
    async def execute(self, query: dict[str, Any]) -> ContentQueryResult:
        """Post the query under a bounded timeout; failures degrade to empty."""
        try:
            hits = await asyncio.wait_for(
                self.client.search(query), timeout=self.client.timeout_seconds
            )
            rows = [_row_from_hit(hit) for hit in hits]
        except TimeoutError:
            return ContentQueryResult.degraded(
                f"index timed out after {self.client.timeout_seconds}s"
            )
        except BackendConnectivityError as e:
            logger.debug("Search index query failed: %s (%s)", e.message, e.details)
            return ContentQueryResult.degraded(e.message)
        return ContentQueryResult.ok(rows)

    @staticmethod
    def _scope_clause(
        scope: SearchScope, account: Actor, library_only: bool
    ) -> dict[str, Any]:
        searchable = {"term": {"searchable_by": account.id}}
        visibilities = SCOPE_VISIBILITIES[scope]
        if library_only or not visibilities:
            return searchable
        return {
            "bool": {
                "should": [
                    searchable,
                    {"terms": {"visibility": [v.value for v in visibilities]}},
                ],
                "minimum_should_match": 1,
            }
        }

    @staticmethod
    def _operator_clause(term: OperatorTerm, account: Actor) -> dict[str, Any] | None:
        key, value = term.key, term.value
        if key == "from":
            if value == "me":
                return {"term": {"account_id": account.id}}
            return {"term": {"account_acct": value}}
        if key in ("is", "has"):
            return {"term": {"properties": value}}
        if key == "language":
            return {"term": {"language": value}}
        if key == "before":
            return {"range": {"created_at": {"lt": start_of_day_utc(term.date_value).isoformat()}}}
        if key == "after":
            _, end = day_bounds_utc(term.date_value)
            return {"range": {"created_at": {"gte": end.isoformat()}}}
        if key == "during":
            start, end = day_bounds_utc(term.date_value)
            return {"range": {"created_at": {"gte": start.isoformat(), "lt": end.isoformat()}}}
        return None


def _row_from_hit(hit: dict[str, Any]) -> ContentRow:
    try:
        source = hit.get("_source") or {}
        return ContentRow(
            id=int(source.get("id", hit.get("_id"))),
            account_id=int(source["account_id"]),
            account_domain=source.get("account_domain") or None,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise BackendConnectivityError(f"Malformed search hit: {e}") from e
