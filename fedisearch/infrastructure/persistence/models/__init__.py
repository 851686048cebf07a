"""Persistence models: ORM entities and mixins."""

from fedisearch.infrastructure.persistence.models.account import (
    Account,
    AccountDomainBlock,
    Block,
    Follow,
    Mute,
)
from fedisearch.infrastructure.persistence.models.mixins import (
    AccountPairMixin,
    BigIdMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from fedisearch.infrastructure.persistence.models.status import Status

__all__ = [
    "Account",
    "AccountDomainBlock",
    "AccountPairMixin",
    "BigIdMixin",
    "Block",
    "Follow",
    "Mute",
    "SoftDeleteMixin",
    "Status",
    "TimestampMixin",
]
