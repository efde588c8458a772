from fastapi import APIRouter, Depends

from app.dependencies import get_current_operator, get_stores, get_tenant_context
from app.models.tenant_context import TenantContext
from app.repositories.store_factory import IdentityStores
from app.services.group_assignment_service import GroupAssignmentService
from app.schemas.assignment_schemas import (
    AssignedGroupResponse,
    GroupAssignmentRequest,
    GroupAssignmentResponse,
    GroupRemovalRequest,
    GroupRemovalResponse,
    SubstitutionResponse,
)
from app.schemas.group_schemas import GroupResponse, UserGroupsResponse

router = APIRouter(dependencies=[Depends(get_current_operator)])


@router.post("/{user_id}/groups", response_model=GroupAssignmentResponse)
def assign_groups(
    user_id: str,
    request: GroupAssignmentRequest,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """
    Assign groups to a user.

    - `group_id` adds one group, `group_ids` replaces the list, `groups`
      creates or reuses groups by name and then replaces the list
    - Home groups are swapped for same-named account groups when the user
      lives in an account
    - Unusable references are dropped and reported in `warnings`
    """
    service = GroupAssignmentService(stores)
    result = service.assign_groups_to_user(user_id, context, request)

    return GroupAssignmentResponse(
        assigned_groups=[AssignedGroupResponse(id=group_id) for group_id in result.assigned_groups],
        warnings=[str(w) for w in result.warnings],
        substitutions=[
            SubstitutionResponse(original=s.original, replacement=s.replacement, name=s.name)
            for s in result.substitutions
        ],
        duplicates_removed=result.duplicates_removed,
    )


@router.delete("/{user_id}/groups", response_model=GroupRemovalResponse)
def remove_groups(
    user_id: str,
    request: GroupRemovalRequest,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Remove groups from a user; ids the user does not have are ignored"""
    service = GroupAssignmentService(stores)
    remaining = service.remove_groups_from_user(user_id, context, request.group_ids)
    return GroupRemovalResponse(remaining=remaining)


@router.get("/{user_id}/groups", response_model=UserGroupsResponse)
def list_user_groups(
    user_id: str,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """List the groups assigned to a user, reporting ids that no longer resolve"""
    service = GroupAssignmentService(stores)
    groups, warnings = service.get_user_groups(user_id, context)
    return UserGroupsResponse(
        groups=[GroupResponse.model_validate(g) for g in groups],
        warnings=[str(w) for w in warnings],
    )
