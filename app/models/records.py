"""
Storage-neutral entity records.

Every EntityStore backend reads and writes these dataclasses, so the
engine never depends on a particular persistence technology.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum as PyEnum
from typing import Any

from app.models.scope import Scope


def new_id() -> str:
    return str(uuid.uuid4())


class UserStatus(str, PyEnum):
    """User lifecycle status"""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


@dataclass(slots=True)
class UserRecord:
    """
    Identity record for a platform user.

    assigned_groups is the only field the assignment engine mutates; the
    rest is carried through untouched. Users are looked up by name through
    their email address.
    """

    first_name: str
    last_name: str
    email_address: str
    scope: Scope = field(default_factory=Scope.home)
    id: str = field(default_factory=new_id)
    middle_name: str | None = None
    status: UserStatus = UserStatus.ACTIVE
    technical_user: bool = False
    start_date: date | None = None
    end_date: date | None = None
    assigned_groups: list[str] = field(default_factory=list)
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def lookup_name(self) -> str:
        return self.email_address


@dataclass(slots=True)
class GroupRecord:
    """Group of users; name is unique within its own scope only."""

    name: str
    scope: Scope = field(default_factory=Scope.home)
    id: str = field(default_factory=new_id)
    description: str | None = None
    entity: str | None = None
    product: str | None = None
    service: str | None = None
    assigned_roles: list[str] = field(default_factory=list)
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def lookup_name(self) -> str:
        return self.name


@dataclass(slots=True)
class RoleRecord:
    """Role with an opaque capability map the engine never inspects."""

    name: str
    scope: Scope = field(default_factory=Scope.home)
    id: str = field(default_factory=new_id)
    description: str | None = None
    scope_config: dict[str, Any] = field(default_factory=dict)
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def lookup_name(self) -> str:
        return self.name
