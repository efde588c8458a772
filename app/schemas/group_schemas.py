from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class GroupCreate(BaseModel):
    """Create a group in the request's tenant partition"""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    entity: str | None = None
    product: str | None = None
    service: str | None = None
    assigned_roles: list[str] = Field(default_factory=list)


class GroupResponse(BaseModel):
    id: str
    name: str
    description: str | None
    entity: str | None
    product: str | None
    service: str | None
    assigned_roles: list[str]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class GroupListResponse(BaseModel):
    groups: list[GroupResponse]
    total: int


class UserGroupsResponse(BaseModel):
    """Groups currently assigned to a user"""

    groups: list[GroupResponse]
    warnings: list[str]


class RoleCreate(BaseModel):
    """Create a role in the request's tenant partition"""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    scope_config: dict[str, Any] = Field(default_factory=dict)


class RoleUpdate(BaseModel):
    """Partial role update; omitted fields keep their value"""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    scope_config: dict[str, Any] | None = None


class RoleResponse(BaseModel):
    id: str
    name: str
    description: str | None
    scope_config: dict[str, Any]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
