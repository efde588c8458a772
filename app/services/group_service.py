import logging

from app.core.exceptions import NotFoundException, ValidationException
from app.core.locks import KeyedLock, entity_locks
from app.models.records import GroupRecord
from app.models.scope import Scope
from app.models.tenant_context import TenantContext
from app.repositories.entity_store import EntityKind
from app.repositories.store_factory import IdentityStores
from app.schemas.assignment_schemas import GroupDescriptor
from app.schemas.group_schemas import GroupCreate
from app.services.scope_resolver import ScopeResolver

logger = logging.getLogger(__name__)

DESCRIPTOR_FIELDS = ("description", "entity", "product", "service")


class GroupService:
    """Service layer for group administration"""

    def __init__(
        self,
        stores: IdentityStores,
        resolver: ScopeResolver | None = None,
        locks: KeyedLock | None = None,
    ):
        self.stores = stores
        self.resolver = resolver or ScopeResolver()
        self.locks = locks or entity_locks

    def create_group(self, data: GroupCreate, context: TenantContext) -> GroupRecord:
        """
        Create a group in the partition designated by the tenant context.

        Group names must be unique per partition: cross-partition
        substitution relies on it.

        Raises:
            ValidationException: If a group with that name already exists there
        """
        scope = self.resolver.resolve(context)
        return self.create_in_scope(
            scope,
            GroupRecord(
                name=data.name,
                description=data.description,
                entity=data.entity,
                product=data.product,
                service=data.service,
                assigned_roles=list(dict.fromkeys(data.assigned_roles)),
            ),
        )

    def list_groups(self, context: TenantContext, search: str | None = None) -> list[GroupRecord]:
        """
        List the groups of the resolved partition.

        Args:
            context: Tenant context of the request
            search: Optional case-insensitive substring of the group name

        Returns:
            Matching groups, oldest first
        """
        scope = self.resolver.resolve(context)
        groups = self.stores.groups.list_in_scope(scope)

        term = _present(search)
        if term is not None:
            term = term.strip().lower()
            groups = [g for g in groups if term in g.name.lower()]

        return groups

    def delete_group(self, group_id: str, context: TenantContext) -> None:
        """
        Delete a group from the resolved partition.

        Users still referencing the group keep the id; it is reported as a
        dangling reference on their next read or assignment.

        Raises:
            NotFoundException: If the group does not exist in the resolved partition
        """
        scope = self.resolver.resolve(context)

        with self.locks.hold((EntityKind.GROUP, scope.key, group_id)):
            group = self.stores.groups.get_by_id_in_scope(scope, group_id)
            if group is None:
                raise NotFoundException(f"Group {group_id} not found in {scope}")

            self.stores.groups.delete(scope, group_id)
            logger.info("Deleted group %s (%r) from %s", group_id, group.name, scope)

    def create_in_scope(self, scope: Scope, group: GroupRecord) -> GroupRecord:
        if self.stores.groups.find_by_name_in_scope(scope, group.name) is not None:
            raise ValidationException(f'Group "{group.name}" already exists in {scope}')

        created = self.stores.groups.put(scope, group)
        logger.info("Created group %s (%r) in %s", created.id, created.name, scope)
        return created

    def upsert_by_name(self, scope: Scope, descriptor: GroupDescriptor) -> GroupRecord:
        """
        Reuse the group named by the descriptor, or create it.

        An existing group only receives the descriptor fields that are
        present, non-blank and different from what is stored, so a sparse
        descriptor never blanks out stored metadata.

        Args:
            scope: Partition to look up / create in
            descriptor: Group name plus optional metadata

        Returns:
            The existing (possibly updated) or newly created group
        """
        existing = self.stores.groups.find_by_name_in_scope(scope, descriptor.name)

        if existing is None:
            return self.create_in_scope(
                scope,
                GroupRecord(
                    name=descriptor.name,
                    **{f: _present(getattr(descriptor, f)) for f in DESCRIPTOR_FIELDS},
                ),
            )

        changed = False
        for field_name in DESCRIPTOR_FIELDS:
            value = _present(getattr(descriptor, field_name))
            if value is not None and value != getattr(existing, field_name):
                setattr(existing, field_name, value)
                changed = True

        if not changed:
            return existing

        logger.info("Updating metadata of group %s (%r) in %s", existing.id, existing.name, scope)
        return self.stores.groups.put(scope, existing)


def _present(value: str | None) -> str | None:
    """Treat blank strings as absent"""
    if value is None or not value.strip():
        return None
    return value
