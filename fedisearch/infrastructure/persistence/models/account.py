"""Account ORM model and the account relationship tables.

Block, Mute, and Follow are directed (account_id acts on target_account_id);
AccountDomainBlock hides a whole remote domain from account_id.
"""

from sqlalchemy import BigInteger, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from fedisearch.infrastructure.persistence.database import Base
from fedisearch.infrastructure.persistence.models.mixins import (
    AccountPairMixin,
    BigIdMixin,
    TimestampMixin,
)


class Account(BigIdMixin, TimestampMixin, Base):
    """Local or remote account. Table: accounts. domain is NULL for local accounts."""

    __tablename__ = "accounts"

    username: Mapped[str] = mapped_column(String, nullable=False)
    domain: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        Index(
            "index_accounts_on_username_and_domain_lower",
            text("lower(username)"),
            text("COALESCE(lower(domain), '')"),
            unique=True,
        ),
    )


class Block(AccountPairMixin, Base):
    """account_id blocks target_account_id. Table: blocks."""

    __tablename__ = "blocks"
    __table_args__ = (
        UniqueConstraint("account_id", "target_account_id", name="index_blocks_on_account_id_and_target_account_id"),
    )


class Mute(AccountPairMixin, Base):
    """account_id mutes target_account_id. Table: mutes."""

    __tablename__ = "mutes"
    __table_args__ = (
        UniqueConstraint("account_id", "target_account_id", name="index_mutes_on_account_id_and_target_account_id"),
    )


class Follow(AccountPairMixin, Base):
    """account_id follows target_account_id. Table: follows."""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("account_id", "target_account_id", name="index_follows_on_account_id_and_target_account_id"),
    )


class AccountDomainBlock(BigIdMixin, TimestampMixin, Base):
    """account_id hides all accounts on domain. Table: account_domain_blocks."""

    __tablename__ = "account_domain_blocks"

    account_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    domain: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "domain", name="index_account_domain_blocks_on_account_id_and_domain"),
    )
