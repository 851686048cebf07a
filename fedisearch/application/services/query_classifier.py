"""Query classification: direct URL resolution vs. per-category search.

Pure decision over request fields. The category a resolved URL belongs to
is only known after resolution, so a DirectResourceCandidate is finalized
by the orchestrator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from fedisearch.application.dtos.search import SearchRequest
from fedisearch.domain.enums import SearchCategory

_URL_RE = re.compile(r"\Ahttps?://", re.IGNORECASE)


@dataclass(frozen=True)
class DirectResourceCandidate:
    """Query should first be resolved as a remote resource URL."""

    url: str


@dataclass(frozen=True)
class CategorySearch:
    """Categories eligible for keyword search."""

    accounts: bool = False
    hashtags: bool = False
    statuses: bool = False

    @property
    def categories(self) -> tuple[SearchCategory, ...]:
        return tuple(c for c in SearchCategory if getattr(self, c.value))


Classification = DirectResourceCandidate | CategorySearch


def is_url_query(request: SearchRequest) -> bool:
    return request.resolve and bool(_URL_RE.match(request.query))


def classify(request: SearchRequest) -> Classification:
    """Decide between direct resolution and category search.

    Args:
        request: Normalized search request (query already stripped).

    Returns:
        DirectResourceCandidate when resolve is set, the query is an
        http(s) URL and the effective offset is 0; otherwise CategorySearch.
    """
    if is_url_query(request) and request.effective_offset == 0:
        return DirectResourceCandidate(url=request.query)
    return categories_for(request)


def categories_for(request: SearchRequest) -> CategorySearch:
    """Apply the per-category eligibility heuristics."""
    query = request.query
    return CategorySearch(
        accounts=request.allows(SearchCategory.ACCOUNTS) and account_searchable(query),
        hashtags=request.allows(SearchCategory.HASHTAGS) and hashtag_searchable(query),
        statuses=(
            request.allows(SearchCategory.STATUSES)
            and request.account is not None
            and status_searchable(query)
        ),
    )


def account_searchable(query: str) -> bool:
    return not (query.startswith("#") or ("@" in query and " " in query))


def hashtag_searchable(query: str) -> bool:
    return "@" not in query


def status_searchable(query: str) -> bool:
    # A lone #tag or @handle token is left to the hashtag and account searches.
    return not ((query.startswith("#") or "@" in query) and " " not in query)
