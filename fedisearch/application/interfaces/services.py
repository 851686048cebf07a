"""Service interfaces (ports) for collaborators outside the search core.

Account search, hashtag search, and remote URL resolution are provided by
the host application; failures are theirs to define.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fedisearch.application.dtos.search import Actor, ResolvedResource


class IAccountSearchService(Protocol):
    """Protocol for account search by name or handle."""

    async def search(
        self,
        query: str,
        account: Actor | None,
        *,
        limit: int,
        offset: int,
        resolve: bool,
    ) -> list[Any]:
        """Return matching account handles in relevance order."""


class IHashtagSearchService(Protocol):
    """Protocol for hashtag search."""

    async def search(
        self,
        query: str,
        *,
        limit: int,
        offset: int,
        exclude_unreviewed: bool,
    ) -> list[Any]:
        """Return matching hashtag handles in relevance order."""


class IUrlResolver(Protocol):
    """Protocol for dereferencing a remote resource URL."""

    async def resolve(
        self, url: str, *, on_behalf_of: Actor | None
    ) -> ResolvedResource | None:
        """Return the resolved resource, or None when it cannot be resolved."""
