"""Declarative base and shared column mixins."""

from datetime import datetime, UTC

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.models.scope import Scope, ScopeTier


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """created_at / updated_at columns maintained by the ORM"""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class ScopedMixin:
    """
    Tenant partition columns.

    scope_key is the partition a row lives in and is what every scoped
    query filters on. The individual account/enterprise columns are kept
    so the Scope can be rebuilt from a row.
    """

    scope_key: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    account_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    enterprise_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    enterprise_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def scope(self) -> Scope:
        if self.account_id is None:
            return Scope.home()
        return Scope(
            tier=ScopeTier.ACCOUNT,
            account_id=self.account_id,
            account_name=self.account_name,
            enterprise_id=self.enterprise_id,
            enterprise_name=self.enterprise_name,
        )

    def assign_scope(self, scope: Scope) -> None:
        self.scope_key = scope.key
        self.account_id = scope.account_id
        self.account_name = scope.account_name
        self.enterprise_id = scope.enterprise_id
        self.enterprise_name = scope.enterprise_name
