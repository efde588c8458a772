import logging

from app.core.exceptions import NotFoundException
from app.models.records import RoleRecord
from app.models.scope import Scope
from app.models.tenant_context import TenantContext
from app.repositories.store_factory import IdentityStores
from app.schemas.group_schemas import RoleCreate, RoleUpdate
from app.services.role_linkage_service import RoleLinkageService
from app.services.scope_resolver import ScopeResolver

logger = logging.getLogger(__name__)


class RoleService:
    """Service layer for role administration"""

    def __init__(self, stores: IdentityStores, resolver: ScopeResolver | None = None):
        self.stores = stores
        self.resolver = resolver or ScopeResolver()

    def _get_role(self, scope: Scope, role_id: str) -> RoleRecord:
        role = self.stores.roles.get_by_id_in_scope(scope, role_id)
        if role is None:
            raise NotFoundException(f"Role {role_id} not found in {scope}")
        return role

    def create_role(self, data: RoleCreate, context: TenantContext) -> RoleRecord:
        """Create a role in the partition designated by the tenant context"""
        scope = self.resolver.resolve(context)
        role = self.stores.roles.put(
            scope,
            RoleRecord(name=data.name, description=data.description, scope_config=data.scope_config),
        )
        logger.info("Created role %s (%r) in %s", role.id, role.name, scope)
        return role

    def update_role(self, role_id: str, data: RoleUpdate, context: TenantContext) -> RoleRecord:
        """Update role details"""
        scope = self.resolver.resolve(context)
        role = self._get_role(scope, role_id)

        if data.name is not None:
            role.name = data.name
        if data.description is not None:
            role.description = data.description
        if data.scope_config is not None:
            role.scope_config = data.scope_config

        return self.stores.roles.put(scope, role)

    def delete_role(self, role_id: str, context: TenantContext) -> None:
        """
        Delete a role and detach it from every group of its partition.

        Raises:
            NotFoundException: If the role does not exist in the resolved partition
        """
        scope = self.resolver.resolve(context)
        role = self._get_role(scope, role_id)

        linkage = RoleLinkageService(self.stores, self.resolver)
        for group in self.stores.groups.list_in_scope(scope):
            if role_id in group.assigned_roles:
                linkage.remove_role_from_group(group.id, context, role_id)

        self.stores.roles.delete(scope, role_id)
        logger.info("Deleted role %s (%r) from %s", role_id, role.name, scope)
