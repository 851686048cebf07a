"""Unit tests for query classification (URL resolution vs. category routing)."""

from types import SimpleNamespace

import pytest

from fedisearch.application.dtos.search import SearchRequest
from fedisearch.application.services.query_classifier import (
    CategorySearch,
    DirectResourceCandidate,
    account_searchable,
    classify,
    hashtag_searchable,
    status_searchable,
)
from fedisearch.domain.enums import SearchCategory

ACTOR = SimpleNamespace(id=1)


def _request(query: str, **kwargs) -> SearchRequest:
    kwargs.setdefault("account", ACTOR)
    return SearchRequest(query=query, **kwargs)


class TestHeuristics:
    """Tests for the per-category eligibility heuristics."""

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("alice", True),
            ("@alice", True),
            ("@alice@example.com", True),
            ("#fediverse", False),
            ("@alice hello", False),
            ("hello world", True),
        ],
    )
    def test_account_searchable(self, query: str, expected: bool) -> None:
        assert account_searchable(query) is expected

    @pytest.mark.parametrize(
        ("query", "expected"),
        [("fediverse", True), ("#fediverse", True), ("@alice", False), ("a@b c", False)],
    )
    def test_hashtag_searchable(self, query: str, expected: bool) -> None:
        assert hashtag_searchable(query) is expected

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("hello", True),
            ("#fediverse", False),
            ("@alice", False),
            ("#fediverse news", True),
            ("@alice hello world", True),
            ("mail@example.com", False),
        ],
    )
    def test_status_searchable(self, query: str, expected: bool) -> None:
        assert status_searchable(query) is expected


class TestClassify:
    """Tests for classify."""

    def test_bare_hashtag_only_searches_hashtags(self) -> None:
        result = classify(_request("#fediverse"))
        assert result == CategorySearch(accounts=False, hashtags=True, statuses=False)

    def test_mention_with_words_skips_hashtags(self) -> None:
        result = classify(_request("@alice hello world"))
        assert result == CategorySearch(accounts=False, hashtags=False, statuses=True)

    def test_plain_words_search_everything(self) -> None:
        result = classify(_request("hello"))
        assert result.categories == (
            SearchCategory.ACCOUNTS,
            SearchCategory.HASHTAGS,
            SearchCategory.STATUSES,
        )

    def test_statuses_need_requesting_account(self) -> None:
        result = classify(SearchRequest(query="hello"))
        assert isinstance(result, CategorySearch)
        assert result.statuses is False
        assert result.accounts is True

    def test_category_restriction_limits_to_one(self) -> None:
        result = classify(_request("hello", category=SearchCategory.HASHTAGS))
        assert result == CategorySearch(hashtags=True)

    def test_category_restriction_still_applies_heuristic(self) -> None:
        result = classify(_request("@alice", category=SearchCategory.HASHTAGS))
        assert result == CategorySearch()
        assert result.categories == ()

    def test_url_with_resolve_is_direct_candidate(self) -> None:
        result = classify(_request("  https://example.com/@alice/1  ", resolve=True))
        assert result == DirectResourceCandidate(url="https://example.com/@alice/1")

    def test_url_without_resolve_is_keyword_search(self) -> None:
        result = classify(_request("https://example.com/@alice/1"))
        assert isinstance(result, CategorySearch)

    def test_url_with_offset_in_restricted_category_is_keyword_search(self) -> None:
        result = classify(
            _request(
                "https://example.com/@alice/1",
                resolve=True,
                category=SearchCategory.STATUSES,
                offset=20,
            )
        )
        assert isinstance(result, CategorySearch)
        assert result.statuses is False

    def test_offset_ignored_without_category(self) -> None:
        result = classify(_request("https://example.com/notes/1", resolve=True, offset=5))
        assert isinstance(result, DirectResourceCandidate)
