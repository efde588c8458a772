"""Tenant scope value type."""

from dataclasses import dataclass
from enum import Enum as PyEnum


class ScopeTier(str, PyEnum):
    """Storage tier a scope points at"""

    HOME = "home"
    ACCOUNT = "account"


@dataclass(frozen=True)
class Scope:
    """
    Tag identifying a tenant partition.

    Either the single shared Home partition (all identifying fields None)
    or one account partition, optionally qualified by enterprise. Two
    scopes are equal only when the tier and every identifying field match
    exactly.
    """

    tier: ScopeTier
    account_id: str | None = None
    account_name: str | None = None
    enterprise_id: str | None = None
    enterprise_name: str | None = None

    @classmethod
    def home(cls) -> "Scope":
        return cls(tier=ScopeTier.HOME)

    @classmethod
    def account(
        cls,
        account_id: str,
        account_name: str,
        enterprise_id: str | None = None,
        enterprise_name: str | None = None,
    ) -> "Scope":
        return cls(
            tier=ScopeTier.ACCOUNT,
            account_id=account_id,
            account_name=account_name,
            enterprise_id=enterprise_id,
            enterprise_name=enterprise_name,
        )

    @property
    def is_home(self) -> bool:
        return self.tier == ScopeTier.HOME

    @property
    def key(self) -> str:
        """
        Deterministic partition key used by storage backends.

        Each identifying field is length-prefixed ("-" when absent), so two
        scopes share a key only when every field matches, whatever
        characters the fields contain.
        """
        if self.is_home:
            return "HOME"
        return "#".join(
            [
                "ACCOUNT",
                _key_part(self.account_id),
                _key_part(self.account_name),
                _key_part(self.enterprise_id),
                _key_part(self.enterprise_name),
            ]
        )

    def __str__(self) -> str:
        if self.is_home:
            return "Home"
        label = f"Account({self.account_name}/{self.account_id}"
        if self.enterprise_id or self.enterprise_name:
            label += f", enterprise={self.enterprise_name}/{self.enterprise_id}"
        return label + ")"


def _key_part(value: str | None) -> str:
    if value is None:
        return "-"
    return f"{len(value)}:{value}"
