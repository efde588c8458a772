import logging

from app.core.exceptions import NotFoundException
from app.core.locks import KeyedLock, entity_locks
from app.models.assignment import RoleAssignmentResult
from app.models.records import GroupRecord
from app.models.scope import Scope
from app.models.tenant_context import TenantContext
from app.repositories.entity_store import EntityKind
from app.repositories.store_factory import IdentityStores
from app.services.scope_resolver import ScopeResolver

logger = logging.getLogger(__name__)


class RoleLinkageService:
    """
    Attaches roles to groups.

    Unlike group assignment, role assignment is additive: new ids are
    unioned into the group's current roles. Roles are never substituted
    across partitions.
    """

    def __init__(
        self,
        stores: IdentityStores,
        resolver: ScopeResolver | None = None,
        locks: KeyedLock | None = None,
    ):
        self.stores = stores
        self.resolver = resolver or ScopeResolver()
        self.locks = locks or entity_locks

    def _get_group(self, scope: Scope, group_id: str) -> GroupRecord:
        group = self.stores.groups.get_by_id_in_scope(scope, group_id)
        if group is None:
            raise NotFoundException(f"Group {group_id} not found in {scope}")
        return group

    def assign_roles_to_group(
        self, group_id: str, context: TenantContext, role_ids: list[str]
    ) -> RoleAssignmentResult:
        """
        Add roles to a group (idempotent union).

        Raises:
            NotFoundException: If the group, or any role being added, does not
                exist in the resolved partition
        """
        scope = self.resolver.resolve(context)

        with self.locks.hold((EntityKind.GROUP, scope.key, group_id)):
            group = self._get_group(scope, group_id)

            new_ids = [r for r in dict.fromkeys(role_ids) if r not in group.assigned_roles]
            missing = [r for r in new_ids if self.stores.roles.get_by_id_in_scope(scope, r) is None]
            if missing:
                raise NotFoundException(f"Roles not found in {scope}: {', '.join(missing)}")

            if new_ids:
                group.assigned_roles = [*group.assigned_roles, *new_ids]
                self.stores.groups.put(scope, group)
                logger.info("Added roles %s to group %s in %s", new_ids, group_id, scope)

        return RoleAssignmentResult(added=len(new_ids), total=len(group.assigned_roles))

    def remove_role_from_group(self, group_id: str, context: TenantContext, role_id: str) -> None:
        """Remove a role from a group; succeeds when the role is not attached"""
        scope = self.resolver.resolve(context)

        with self.locks.hold((EntityKind.GROUP, scope.key, group_id)):
            group = self._get_group(scope, group_id)
            if role_id not in group.assigned_roles:
                return

            group.assigned_roles = [r for r in group.assigned_roles if r != role_id]
            self.stores.groups.put(scope, group)
            logger.info("Removed role %s from group %s in %s", role_id, group_id, scope)
