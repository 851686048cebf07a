"""SearchService unit tests with mocked collaborators."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fedisearch.application.dtos.search import (
    ContentQueryResult,
    ContentRow,
    RelationshipMap,
    ResolvedResource,
    SearchRequest,
)
from fedisearch.domain.enums import ResourceKind, SearchCategory
from fedisearch.domain.exceptions import BackendFatalError, GrammarError

URL = "https://remote.example/@alice/109"


def _request(actor, query: str = "hello", **kwargs) -> SearchRequest:
    return SearchRequest(query=query, account=actor, **kwargs)


class TestShortCircuit:
    """Blank queries and zero limits never reach a collaborator."""

    @pytest.mark.parametrize(("query", "limit"), [("", 20), ("   ", 20), ("hello", 0)])
    async def test_returns_empty_without_calls(
        self, search_service, collaborators, actor, query, limit
    ) -> None:
        result = await search_service.search(_request(actor, query, limit=limit))

        assert result.to_dict() == {"accounts": [], "hashtags": [], "statuses": []}
        collaborators.account_search.search.assert_not_called()
        collaborators.hashtag_search.search.assert_not_called()
        collaborators.content_backend.search.assert_not_called()
        collaborators.url_resolver.resolve.assert_not_called()
        collaborators.relationship_repo.relations_map.assert_not_called()


class TestCategoryDispatch:
    """Which category searches run for a given request."""

    async def test_hashtag_restriction(self, search_service, collaborators, actor) -> None:
        result = await search_service.search(
            _request(actor, category=SearchCategory.HASHTAGS, offset=40, limit=5)
        )

        assert result.hashtags == ["tag:fediverse"]
        assert result.accounts == []
        assert result.statuses == []
        collaborators.account_search.search.assert_not_called()
        collaborators.content_backend.search.assert_not_called()
        collaborators.hashtag_search.search.assert_awaited_once_with(
            "hello", limit=5, offset=40, exclude_unreviewed=False
        )

    async def test_bare_hashtag(self, search_service, collaborators, actor) -> None:
        result = await search_service.search(_request(actor, "#fediverse"))

        assert result.hashtags == ["tag:fediverse"]
        collaborators.account_search.search.assert_not_called()
        collaborators.content_backend.search.assert_not_called()

    async def test_mention_with_words(self, search_service, collaborators, actor) -> None:
        await search_service.search(_request(actor, "@alice hello world"))

        collaborators.hashtag_search.search.assert_not_called()
        collaborators.account_search.search.assert_not_called()
        collaborators.content_backend.search.assert_awaited_once()

    async def test_offset_dropped_without_category(
        self, search_service, collaborators, actor
    ) -> None:
        await search_service.search(_request(actor, offset=40, resolve=True))

        collaborators.account_search.search.assert_awaited_once_with(
            "hello", actor, limit=20, offset=0, resolve=True
        )

    async def test_statuses_skipped_without_account(
        self, search_service, collaborators
    ) -> None:
        result = await search_service.search(SearchRequest(query="hello"))

        assert result.accounts == ["account:alice"]
        collaborators.content_backend.search.assert_not_called()

    async def test_idempotent(self, search_service, collaborators, actor) -> None:
        collaborators.content_backend.search.return_value = ContentQueryResult.ok(
            [ContentRow(3, 2), ContentRow(2, 3), ContentRow(1, 4)]
        )
        request = _request(actor)

        first = await search_service.search(request)
        second = await search_service.search(request)

        assert first == second
        assert [r.id for r in first.statuses] == [3, 2, 1]


class TestDirectResource:
    """URL queries with resolve set."""

    async def test_resolved_status_is_only_result(
        self, search_service, collaborators, actor
    ) -> None:
        collaborators.url_resolver.resolve.return_value = ResolvedResource(
            ResourceKind.STATUS, "status:109"
        )

        result = await search_service.search(_request(actor, URL, resolve=True))

        assert result.to_dict() == {
            "accounts": [],
            "hashtags": [],
            "statuses": ["status:109"],
        }
        collaborators.url_resolver.resolve.assert_awaited_once_with(URL, on_behalf_of=actor)
        collaborators.account_search.search.assert_not_called()
        collaborators.hashtag_search.search.assert_not_called()
        collaborators.content_backend.search.assert_not_called()

    async def test_unresolved_url_falls_back_to_categories(
        self, search_service, collaborators, actor
    ) -> None:
        result = await search_service.search(_request(actor, URL, resolve=True))

        collaborators.url_resolver.resolve.assert_awaited_once()
        assert result.accounts == ["account:alice"]

    async def test_category_mismatch_falls_back(
        self, search_service, collaborators, actor
    ) -> None:
        collaborators.url_resolver.resolve.return_value = ResolvedResource(
            ResourceKind.ACCOUNT, "account:remote"
        )

        result = await search_service.search(
            _request(actor, URL, resolve=True, category=SearchCategory.HASHTAGS)
        )

        assert result.accounts == []
        collaborators.hashtag_search.search.assert_not_called()

    async def test_other_kind_falls_back(self, search_service, collaborators, actor) -> None:
        collaborators.url_resolver.resolve.return_value = ResolvedResource(
            ResourceKind.OTHER, object()
        )

        result = await search_service.search(_request(actor, URL, resolve=True))

        assert result.statuses == []
        assert result.accounts == ["account:alice"]


class TestStatusSearch:
    """Status results, privacy filtering, and backend failure handling."""

    async def test_privacy_filter_applied(
        self, search_service, collaborators, actor
    ) -> None:
        rows = [
            ContentRow(50, 2),
            ContentRow(40, 3, "spam.example"),
            ContentRow(30, 1),
            ContentRow(20, 4, "Spam.Example"),
        ]
        collaborators.content_backend.search.return_value = ContentQueryResult.ok(rows)
        collaborators.relationship_repo.relations_map.return_value = RelationshipMap(
            muting=frozenset({2}),
            following=frozenset({4}),
            domain_blocking=frozenset({"spam.example"}),
        )

        result = await search_service.search(_request(actor))

        assert [r.id for r in result.statuses] == [30, 20]
        collaborators.relationship_repo.relations_map.assert_awaited_once_with(
            1, {2, 3, 1, 4}, {None, "spam.example", "Spam.Example"}
        )

    async def test_empty_rows_skip_relationship_lookup(
        self, search_service, collaborators, actor
    ) -> None:
        result = await search_service.search(_request(actor))

        assert result.statuses == []
        collaborators.relationship_repo.relations_map.assert_not_called()

    async def test_degraded_backend_empties_statuses_only(
        self, search_service, collaborators, actor
    ) -> None:
        collaborators.content_backend.name = "index"
        collaborators.content_backend.search.return_value = ContentQueryResult.degraded(
            "index timed out after 5.0s"
        )

        result = await search_service.search(_request(actor))

        assert result.statuses == []
        assert result.accounts == ["account:alice"]
        assert result.hashtags == ["tag:fediverse"]
        collaborators.relationship_repo.relations_map.assert_not_called()

    async def test_fatal_backend_error_propagates(
        self, search_service, collaborators, actor
    ) -> None:
        collaborators.content_backend.search.side_effect = BackendFatalError(
            "connection refused", backend="postgres"
        )

        with pytest.raises(BackendFatalError):
            await search_service.search(_request(actor))
        # Sibling categories still ran to completion.
        collaborators.account_search.search.assert_awaited_once()
        collaborators.hashtag_search.search.assert_awaited_once()

    async def test_grammar_error_propagates(
        self, search_service, collaborators, actor
    ) -> None:
        collaborators.content_backend.search.side_effect = GrammarError(
            "Unterminated quoted phrase", position=0
        )

        with pytest.raises(GrammarError):
            await search_service.search(_request(actor, 'hello "world'))

    async def test_relationship_failure_propagates(
        self, search_service, collaborators, actor
    ) -> None:
        collaborators.content_backend.search.return_value = ContentQueryResult.ok(
            [ContentRow(1, 2)]
        )
        collaborators.relationship_repo.relations_map = AsyncMock(
            side_effect=BackendFatalError("Relationship lookup failed", backend="postgres")
        )

        with pytest.raises(BackendFatalError, match="Relationship lookup failed"):
            await search_service.search(_request(actor))


def test_actor_protocol_only_needs_id() -> None:
    request = SearchRequest(query="x", account=SimpleNamespace(id=9))
    assert request.account.id == 9
