from fastapi import APIRouter, Depends, Query, status

from app.dependencies import get_current_operator, get_stores, get_tenant_context
from app.models.tenant_context import TenantContext
from app.repositories.store_factory import IdentityStores
from app.services.group_service import GroupService
from app.services.role_linkage_service import RoleLinkageService
from app.schemas.assignment_schemas import RoleAssignmentRequest, RoleAssignmentResponse
from app.schemas.group_schemas import GroupCreate, GroupListResponse, GroupResponse

router = APIRouter(dependencies=[Depends(get_current_operator)])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
def create_group(
    data: GroupCreate,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Create a group; names must be unique within the tenant partition"""
    service = GroupService(stores)
    return GroupResponse.model_validate(service.create_group(data, context))


@router.get("", response_model=GroupListResponse)
def list_groups(
    q: str | None = Query(None, description="Filter by group name (partial match, case-insensitive)"),
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """List the groups of the tenant partition"""
    service = GroupService(stores)
    groups = service.list_groups(context, search=q)
    return GroupListResponse(groups=[GroupResponse.model_validate(g) for g in groups], total=len(groups))


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group(
    group_id: str,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Delete a group; users that still reference it see a dangling-reference warning"""
    service = GroupService(stores)
    service.delete_group(group_id, context)
    return None


@router.post("/{group_id}/roles", response_model=RoleAssignmentResponse)
def assign_roles(
    group_id: str,
    request: RoleAssignmentRequest,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Add roles to a group; roles already attached are left as they are"""
    service = RoleLinkageService(stores)
    result = service.assign_roles_to_group(group_id, context, request.role_ids)
    return RoleAssignmentResponse(added=result.added, total=result.total)


@router.delete("/{group_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_role(
    group_id: str,
    role_id: str,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Detach a role from a group (idempotent)"""
    service = RoleLinkageService(stores)
    service.remove_role_from_group(group_id, context, role_id)
    return None
