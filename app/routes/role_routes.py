from fastapi import APIRouter, Depends, status

from app.dependencies import get_current_operator, get_stores, get_tenant_context
from app.models.tenant_context import TenantContext
from app.repositories.store_factory import IdentityStores
from app.services.role_service import RoleService
from app.schemas.group_schemas import RoleCreate, RoleResponse, RoleUpdate

router = APIRouter(dependencies=[Depends(get_current_operator)])


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    data: RoleCreate,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Create a role in the tenant partition"""
    service = RoleService(stores)
    return RoleResponse.model_validate(service.create_role(data, context))


@router.patch("/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: str,
    data: RoleUpdate,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Update role details"""
    service = RoleService(stores)
    return RoleResponse.model_validate(service.update_role(role_id, data, context))


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: str,
    context: TenantContext = Depends(get_tenant_context),
    stores: IdentityStores = Depends(get_stores),
):
    """Delete a role and detach it from the groups of its partition"""
    service = RoleService(stores)
    service.delete_role(role_id, context)
    return None
