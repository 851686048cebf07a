"""DTOs for search requests and results (no dependency on ORM or HTTP)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from fedisearch.domain.enums import ResourceKind, SearchCategory
from fedisearch.domain.exceptions import ValidationException

T = TypeVar("T")


class Actor(Protocol):
    """Requesting account. Only the id is needed by the search core."""

    id: int


def _non_negative_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationException(
            f"{field_name} must be a non-negative integer", field=field_name
        ) from None
    if number < 0:
        raise ValidationException(f"{field_name} must be a non-negative integer", field=field_name)
    return number


@dataclass(frozen=True)
class SearchRequest:
    """One search call: query text, requester, paging and refinements.

    offset only pages within a single category; without a category
    restriction the effective offset is 0.
    """

    query: str
    account: Actor | None = None
    limit: int = 20
    offset: int = 0
    category: SearchCategory | None = None
    resolve: bool = False
    # Status refinements
    account_id: int | None = None
    min_id: int | None = None
    max_id: int | None = None
    # Hashtag refinement, passed through to the hashtag search
    exclude_unreviewed: bool = False

    def __post_init__(self) -> None:
        for name in ("limit", "offset"):
            object.__setattr__(self, name, _non_negative_int(getattr(self, name), name))
        if self.category is not None and not isinstance(self.category, SearchCategory):
            try:
                category = SearchCategory(self.category)
            except ValueError:
                raise ValidationException(
                    f"category must be one of {SearchCategory.values()}", field="category"
                ) from None
            object.__setattr__(self, "category", category)
        object.__setattr__(self, "query", (self.query or "").strip())

    @property
    def effective_offset(self) -> int:
        return self.offset if self.category is not None else 0

    @property
    def is_blank(self) -> bool:
        """True when the call must short-circuit to an empty result."""
        return not self.query or self.limit == 0

    def allows(self, category: SearchCategory) -> bool:
        """True when no restriction is set or the restriction names category."""
        return self.category is None or self.category == category


@dataclass(frozen=True)
class StatusRefinements:
    """Exact-match and id-range filters for status search."""

    account_id: int | None = None
    min_id: int | None = None
    max_id: int | None = None

    @classmethod
    def from_request(cls, request: SearchRequest) -> StatusRefinements:
        return cls(
            account_id=request.account_id,
            min_id=request.min_id,
            max_id=request.max_id,
        )


@dataclass(frozen=True)
class ContentRow:
    """Row shape both content backends return, in backend relevance order.

    account_domain is None for local accounts.
    """

    id: int
    account_id: int
    account_domain: str | None = None


@dataclass(frozen=True)
class ContentQueryResult:
    """Outcome of a content-search execution: rows, or degraded to empty.

    Use ContentQueryResult.ok / ContentQueryResult.degraded rather than the
    constructor.
    """

    rows: tuple[ContentRow, ...] = ()
    degraded_reason: str | None = None

    @classmethod
    def ok(cls, rows: list[ContentRow] | tuple[ContentRow, ...]) -> ContentQueryResult:
        return cls(rows=tuple(rows))

    @classmethod
    def degraded(cls, reason: str) -> ContentQueryResult:
        return cls(rows=(), degraded_reason=reason)

    @property
    def is_degraded(self) -> bool:
        return self.degraded_reason is not None


@dataclass(frozen=True)
class RelationshipMap:
    """Relations between the requester and a bounded set of status owners.

    Built fresh for every search call; never cached.
    """

    blocking: frozenset[int] = frozenset()
    blocked_by: frozenset[int] = frozenset()
    muting: frozenset[int] = frozenset()
    following: frozenset[int] = frozenset()
    domain_blocking: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ResolvedResource(Generic[T]):
    """A remote resource resolved from a URL query (tagged by kind)."""

    kind: ResourceKind
    handle: T

    @property
    def category(self) -> SearchCategory | None:
        return self.kind.category


@dataclass
class SearchResult:
    """Category-keyed result set. Every category key is always present."""

    accounts: list[Any] = field(default_factory=list)
    hashtags: list[Any] = field(default_factory=list)
    statuses: list[Any] = field(default_factory=list)

    def __getitem__(self, category: SearchCategory | str) -> list[Any]:
        return getattr(self, SearchCategory(category).value)

    def __setitem__(self, category: SearchCategory | str, value: list[Any]) -> None:
        setattr(self, SearchCategory(category).value, list(value))

    def to_dict(self) -> dict[str, list[Any]]:
        return {
            SearchCategory.ACCOUNTS.value: list(self.accounts),
            SearchCategory.HASHTAGS.value: list(self.hashtags),
            SearchCategory.STATUSES.value: list(self.statuses),
        }
