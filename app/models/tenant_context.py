"""Tenant context supplied by the caller of the assignment engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """
    Raw tenant context extracted from a request.

    All fields are optional. The context is not interpreted here; the
    ScopeResolver decides which partition it designates.

    Attributes:
        account_id: Account identifier, if the request targets an account
        account_name: Account display name (part of the partition key)
        enterprise_id: Optional enterprise qualifier
        enterprise_name: Optional enterprise display name
    """

    account_id: str | None = None
    account_name: str | None = None
    enterprise_id: str | None = None
    enterprise_name: str | None = None

    def __repr__(self) -> str:
        return (
            f"<TenantContext(account_id={self.account_id!r}, account_name={self.account_name!r}, "
            f"enterprise_id={self.enterprise_id!r})>"
        )
