"""Privacy filter for status search results.

Evaluates each row against a preloaded RelationshipMap so that filtering a
page of results never issues per-row queries.
"""

from __future__ import annotations

from collections.abc import Iterable

from fedisearch.application.dtos.search import Actor, ContentRow, RelationshipMap


class StatusFilter:
    """Decides whether one status is hidden from the requesting account."""

    def __init__(
        self,
        status: ContentRow,
        account: Actor | None,
        relations: RelationshipMap,
    ) -> None:
        self.status = status
        self.account = account
        self.relations = relations

    def filtered(self) -> bool:
        """Return True when the status must be removed from the results."""
        if self.account is None or self.status.account_id == self.account.id:
            return False
        return (
            self.blocking_account()
            or self.blocked_by_account()
            or self.muting_account()
            or self.blocking_domain()
        )

    def blocking_account(self) -> bool:
        return self.status.account_id in self.relations.blocking

    def blocked_by_account(self) -> bool:
        return self.status.account_id in self.relations.blocked_by

    def muting_account(self) -> bool:
        return self.status.account_id in self.relations.muting

    def blocking_domain(self) -> bool:
        # Following an account overrides a block of its domain.
        domain = self.status.account_domain
        return (
            domain is not None
            and domain.lower() in self.relations.domain_blocking
            and self.status.account_id not in self.relations.following
        )


def filter_statuses(
    statuses: Iterable[ContentRow],
    relations: RelationshipMap,
    account: Actor | None,
) -> list[ContentRow]:
    """Drop statuses the account may not see, preserving order."""
    return [
        status
        for status in statuses
        if not StatusFilter(status, account, relations).filtered()
    ]
