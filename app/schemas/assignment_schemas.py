from pydantic import BaseModel, Field, model_validator


class GroupDescriptor(BaseModel):
    """Inline group definition: reuse the same-named group in scope or create it"""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    entity: str | None = None
    product: str | None = None
    service: str | None = None


class GroupAssignmentRequest(BaseModel):
    """
    Groups to assign to a user, in exactly one of three shapes.

    - group_id: add one group to the user's current groups
    - group_ids: replace the user's groups with this list
    - groups: create-or-reuse each descriptor, then replace with the result
    """

    group_id: str | None = Field(None, min_length=1)
    group_ids: list[str] | None = None
    groups: list[GroupDescriptor] | None = None

    @model_validator(mode="after")
    def exactly_one_shape(self) -> "GroupAssignmentRequest":
        supplied = [
            shape
            for shape in (self.group_id, self.group_ids, self.groups)
            if shape is not None
        ]
        if len(supplied) != 1:
            raise ValueError("Provide exactly one of group_id, group_ids or groups")
        return self


class SubstitutionResponse(BaseModel):
    original: str
    replacement: str
    name: str


class AssignedGroupResponse(BaseModel):
    id: str


class GroupAssignmentResponse(BaseModel):
    """Outcome of assigning groups to a user"""

    assigned_groups: list[AssignedGroupResponse]
    warnings: list[str]
    substitutions: list[SubstitutionResponse]
    duplicates_removed: int = 0


class GroupRemovalRequest(BaseModel):
    group_ids: list[str] = Field(..., description="Group ids to remove from the user")


class GroupRemovalResponse(BaseModel):
    remaining: list[str]


class RoleAssignmentRequest(BaseModel):
    role_ids: list[str] = Field(..., min_length=1)


class RoleAssignmentResponse(BaseModel):
    added: int
    total: int
