"""Batched relationship lookups for privacy filtering (implements IRelationshipRepository)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fedisearch.application.dtos.search import RelationshipMap
from fedisearch.domain.exceptions import BackendFatalError
from fedisearch.infrastructure.persistence.models.account import (
    AccountDomainBlock,
    Block,
    Follow,
    Mute,
)


class RelationshipRepository:
    """Loads the requester's relations to a candidate set: one query per kind.

    Queries share the session and run sequentially. Empty candidate sets
    skip the query.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def relations_map(
        self,
        account_id: int,
        account_ids: Iterable[int],
        domains: Iterable[str | None],
    ) -> RelationshipMap:
        """Return blocking, blocked_by, muting, following and domain_blocking sets."""
        ids = {i for i in account_ids if i is not None}
        domain_set = {d.lower() for d in domains if d}
        try:
            return RelationshipMap(
                blocking=await self.blocking(account_id, ids),
                blocked_by=await self.blocked_by(account_id, ids),
                muting=await self.muting(account_id, ids),
                following=await self.following(account_id, ids),
                domain_blocking=await self.domain_blocking(account_id, domain_set),
            )
        except SQLAlchemyError as e:
            raise BackendFatalError(
                f"Relationship lookup failed: {e}", backend="postgres"
            ) from e

    async def blocking(self, account_id: int, target_ids: set[int]) -> frozenset[int]:
        """Targets the account blocks."""
        if not target_ids:
            return frozenset()
        query = select(Block.target_account_id).where(
            Block.account_id == account_id,
            Block.target_account_id.in_(target_ids),
        )
        return await self._id_set(query)

    async def blocked_by(self, account_id: int, target_ids: set[int]) -> frozenset[int]:
        """Targets that block the account."""
        if not target_ids:
            return frozenset()
        query = select(Block.account_id).where(
            Block.target_account_id == account_id,
            Block.account_id.in_(target_ids),
        )
        return await self._id_set(query)

    async def muting(self, account_id: int, target_ids: set[int]) -> frozenset[int]:
        if not target_ids:
            return frozenset()
        query = select(Mute.target_account_id).where(
            Mute.account_id == account_id,
            Mute.target_account_id.in_(target_ids),
        )
        return await self._id_set(query)

    async def following(self, account_id: int, target_ids: set[int]) -> frozenset[int]:
        if not target_ids:
            return frozenset()
        query = select(Follow.target_account_id).where(
            Follow.account_id == account_id,
            Follow.target_account_id.in_(target_ids),
        )
        return await self._id_set(query)

    async def domain_blocking(self, account_id: int, domains: set[str]) -> frozenset[str]:
        """Domains (lower-cased) the account has blocked."""
        if not domains:
            return frozenset()
        query = select(func.lower(AccountDomainBlock.domain)).where(
            AccountDomainBlock.account_id == account_id,
            func.lower(AccountDomainBlock.domain).in_(domains),
        )
        result = await self.db.execute(query)
        return frozenset(row[0] for row in result.fetchall())

    async def _id_set(self, query) -> frozenset[int]:
        result = await self.db.execute(query)
        return frozenset(row[0] for row in result.fetchall())
