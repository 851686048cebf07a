"""Domain enumerations for fedisearch.

Enums represent fixed sets of domain values (result categories, search
scope tiers, backends, status visibility).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class SearchCategory(_ValuesMixin, str, Enum):
    """Result partition of a search. Values are the result map keys."""

    ACCOUNTS = "accounts"
    HASHTAGS = "hashtags"
    STATUSES = "statuses"

    @classmethod
    def _missing_(cls, value: object) -> "SearchCategory | None":
        # "content" is accepted as another name for statuses.
        if isinstance(value, str) and value.strip().lower() == "content":
            return cls.STATUSES
        return None


class SearchScope(_ValuesMixin, str, Enum):
    """Visibility ceiling applied to status search.

    CLASSIC only searches the requester's own statuses.
    """

    CLASSIC = "classic"
    PUBLIC = "public"
    PUBLIC_OR_UNLISTED = "public_or_unlisted"


class SearchBackend(_ValuesMixin, str, Enum):
    """Content-search backend selected at startup."""

    POSTGRES = "postgres"
    INDEX = "index"
    DISABLED = "disabled"


class Visibility(_ValuesMixin, str, Enum):
    """Status visibility. Stored as integers in the relational store."""

    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"
    DIRECT = "direct"
    LIMITED = "limited"

    @property
    def db_value(self) -> int:
        """Integer column value used by the statuses table."""
        return _VISIBILITY_DB_VALUES[self]


_VISIBILITY_DB_VALUES = {
    Visibility.PUBLIC: 0,
    Visibility.UNLISTED: 1,
    Visibility.PRIVATE: 2,
    Visibility.DIRECT: 3,
    Visibility.LIMITED: 4,
}

SCOPE_VISIBILITIES: dict[SearchScope, tuple[Visibility, ...]] = {
    SearchScope.CLASSIC: (),
    SearchScope.PUBLIC: (Visibility.PUBLIC,),
    SearchScope.PUBLIC_OR_UNLISTED: (Visibility.PUBLIC, Visibility.UNLISTED),
}


class ResourceKind(_ValuesMixin, str, Enum):
    """Type of a directly-resolved remote resource."""

    ACCOUNT = "account"
    STATUS = "status"
    OTHER = "other"

    @property
    def category(self) -> SearchCategory | None:
        """Result category the resource belongs to, or None."""
        if self is ResourceKind.ACCOUNT:
            return SearchCategory.ACCOUNTS
        if self is ResourceKind.STATUS:
            return SearchCategory.STATUSES
        return None
