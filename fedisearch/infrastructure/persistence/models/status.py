"""Status ORM model. Table: statuses.

visibility is stored as an integer (see Visibility.db_value). The full-text
index covers spoiler_text || text for live, non-reblog public and unlisted
statuses; the relational search backend builds the same expression.
"""

from sqlalchemy import (
    ARRAY,
    BigInteger,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text as sql_text,
)
from sqlalchemy.orm import Mapped, mapped_column

from fedisearch.domain.enums import Visibility
from fedisearch.infrastructure.persistence.database import Base
from fedisearch.infrastructure.persistence.models.mixins import (
    BigIdMixin,
    SoftDeleteMixin,
    TimestampMixin,
)

FULL_TEXT_DOCUMENT_SQL = (
    "(to_tsvector('english', spoiler_text) || to_tsvector('english', text))"
)


class Status(BigIdMixin, TimestampMixin, SoftDeleteMixin, Base):
    """A post. Reblogs reference the original through reblog_of_id."""

    __tablename__ = "statuses"

    account_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    spoiler_text: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    visibility: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    sensitive: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    language: Mapped[str | None] = mapped_column(String, nullable=True)
    reblog_of_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("statuses.id", ondelete="CASCADE"), nullable=True, index=True
    )
    in_reply_to_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    poll_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    ordered_media_attachment_ids: Mapped[list[int] | None] = mapped_column(
        ARRAY(BigInteger), nullable=True
    )

    __table_args__ = (
        Index(
            "index_statuses_full_text",
            sql_text(FULL_TEXT_DOCUMENT_SQL),
            postgresql_using="gin",
            postgresql_where=sql_text(
                "deleted_at IS NULL AND reblog_of_id IS NULL AND visibility IN "
                f"({Visibility.PUBLIC.db_value}, {Visibility.UNLISTED.db_value})"
            ),
        ),
    )
