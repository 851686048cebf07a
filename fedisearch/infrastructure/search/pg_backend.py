"""Relational status search. Uses PostgreSQL tsvector over spoiler_text and text.

Limitations: media descriptions and poll options are not searched, and the
classic scope only covers the requester's own statuses (not favourites,
boosts, or bookmarks).
"""

from __future__ import annotations

import logging

from sqlalchemy import ColumnElement, Select, and_, func, literal_column, not_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

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
from fedisearch.domain.exceptions import BackendFatalError
from fedisearch.infrastructure.persistence.models.account import Account
from fedisearch.infrastructure.persistence.models.status import Status
from fedisearch.shared.telemetry.tracing import traced
from fedisearch.shared.utils.datetime import day_bounds_utc, start_of_day_utc

logger = logging.getLogger(__name__)

# Inlined (not bound) so the planner matches index_statuses_full_text.
_TS_CONFIG = literal_column("'english'")


def full_text_document() -> ColumnElement:
    """to_tsvector(spoiler_text) || to_tsvector(text), as indexed."""
    return func.to_tsvector(_TS_CONFIG, Status.spoiler_text).op("||")(
        func.to_tsvector(_TS_CONFIG, Status.text)
    )


class PostgresContentSearchBackend:
    """Status full-text search against the statuses table (implements IContentSearchBackend)."""

    name = "postgres"

    def __init__(self, db: AsyncSession, scope: SearchScopeConfig) -> None:
        self.db = db
        self.scope = scope

    async def search(self, request: SearchRequest) -> ContentQueryResult:
        """Parse, build, and execute. GrammarError and BackendFatalError propagate."""
        parsed = parse(request.query)
        if not parsed.terms:
            # Nothing to match on (e.g. '""'); never fall back to match-all.
            return ContentQueryResult.ok([])
        query = self.build(
            SearchCategory.STATUSES,
            parsed,
            self.scope,
            request.account,
            StatusRefinements.from_request(request),
            request.limit,
            request.effective_offset,
        )
        return await self.execute(query)

    def build(
        self,
        category: SearchCategory,
        parsed: ParsedQuery,
        scope: SearchScopeConfig,
        account: Actor,
        refinements: StatusRefinements,
        limit: int,
        offset: int,
    ) -> Select:
        """Build the SELECT for one page of matching statuses."""
        if category is not SearchCategory.STATUSES:
            raise ValueError(f"Relational backend only searches statuses, got {category!r}")

        query = (
            select(Status.id, Status.account_id, Account.domain.label("account_domain"))
            .join(Account, Account.id == Status.account_id)
            .where(Status.deleted_at.is_(None), Status.reblog_of_id.is_(None))
        )

        library_only = any(t.value == "library" for t in parsed.operators_for("in"))
        query = query.where(self._scope_condition(scope.scope, account, library_only))

        if parsed.has_text:
            tsquery = func.websearch_to_tsquery(_TS_CONFIG, parsed.text)
            document = full_text_document()
            query = query.where(
                tsquery.op("@@", is_comparison=True)(document)
            ).order_by(func.ts_rank(document, tsquery).desc(), Status.id.desc())
        else:
            query = query.order_by(Status.id.desc())

        for term in parsed.operators:
            condition = self._operator_condition(term, account)
            if condition is None:
                continue
            query = query.where(not_(condition) if term.negated else condition)

        if refinements.account_id is not None:
            query = query.where(Status.account_id == int(refinements.account_id))
        if refinements.min_id is not None:
            query = query.where(Status.id > int(refinements.min_id))
        if refinements.max_id is not None:
            query = query.where(Status.id < int(refinements.max_id))

        return query.limit(limit).offset(offset)

    @traced("search.statuses.postgres")
    async def execute(self, query: Select) -> ContentQueryResult:
        """Run the SELECT. Database failures are fatal for the whole search."""
        try:
            result = await self.db.execute(query)
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.exception("Relational status search failed")
            raise BackendFatalError(f"Status search failed: {e}", backend=self.name) from e
        return ContentQueryResult.ok(
            [
                ContentRow(
                    id=row["id"],
                    account_id=row["account_id"],
                    account_domain=row["account_domain"],
                )
                for row in rows
            ]
        )

    @staticmethod
    def _scope_condition(
        scope: SearchScope, account: Actor, library_only: bool
    ) -> ColumnElement[bool]:
        visibilities = SCOPE_VISIBILITIES[scope]
        if library_only or not visibilities:
            return Status.account_id == account.id
        return Status.visibility.in_([v.db_value for v in visibilities])

    @staticmethod
    def _operator_condition(
        term: OperatorTerm, account: Actor
    ) -> ColumnElement[bool] | None:
        key, value = term.key, term.value
        if key == "from":
            if value == "me":
                return Status.account_id == account.id
            username, _, domain = value.partition("@")
            if domain:
                return and_(
                    func.lower(Account.username) == username,
                    func.lower(Account.domain) == domain,
                )
            return and_(func.lower(Account.username) == username, Account.domain.is_(None))
        if key == "is":
            if value == "reply":
                return Status.in_reply_to_id.is_not(None)
            return Status.sensitive.is_(True)
        if key == "has":
            if value == "media":
                return func.cardinality(Status.ordered_media_attachment_ids) > 0
            if value == "poll":
                return Status.poll_id.is_not(None)
            logger.debug("has:%s is not supported by the relational backend; ignored", value)
            return None
        if key == "language":
            return Status.language == value
        if key == "before":
            return Status.created_at < start_of_day_utc(term.date_value)
        if key == "after":
            _, end = day_bounds_utc(term.date_value)
            return Status.created_at >= end
        if key == "during":
            start, end = day_bounds_utc(term.date_value)
            return and_(Status.created_at >= start, Status.created_at < end)
        # in: is handled as part of the scope condition
        return None
