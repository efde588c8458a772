import logging

from app.core.exceptions import NotFoundException, ValidationFailedException
from app.core.locks import KeyedLock, entity_locks
from app.models.assignment import AssignmentWarning, GroupAssignmentResult, WarningCode
from app.models.records import GroupRecord, UserRecord
from app.models.scope import Scope
from app.models.tenant_context import TenantContext
from app.repositories.entity_store import EntityKind
from app.repositories.store_factory import IdentityStores
from app.schemas.assignment_schemas import GroupAssignmentRequest
from app.services.group_scope_validator import GroupScopeValidator
from app.services.group_service import GroupService
from app.services.scope_resolver import ScopeResolver

logger = logging.getLogger(__name__)


class GroupAssignmentService:
    """Service layer for assigning groups to users across tenant partitions"""

    def __init__(
        self,
        stores: IdentityStores,
        resolver: ScopeResolver | None = None,
        locks: KeyedLock | None = None,
    ):
        self.stores = stores
        self.resolver = resolver or ScopeResolver()
        self.locks = locks or entity_locks
        self.validator = GroupScopeValidator(stores.groups)
        self.group_service = GroupService(stores, self.resolver)

    def _get_user(self, scope: Scope, user_id: str) -> UserRecord:
        user = self.stores.users.get_by_id_in_scope(scope, user_id)
        if user is None:
            raise NotFoundException(f"User {user_id} not found in {scope}")
        return user

    def _normalize_request(
        self, user: UserRecord, scope: Scope, request: GroupAssignmentRequest
    ) -> list[str]:
        """Turn any of the three request shapes into the full list of ids to validate"""
        if request.group_id is not None:
            if request.group_id in user.assigned_groups:
                return list(user.assigned_groups)
            return [*user.assigned_groups, request.group_id]

        if request.group_ids is not None:
            return list(request.group_ids)

        group_ids: list[str] = []
        for descriptor in request.groups:
            group = self.group_service.upsert_by_name(scope, descriptor)
            if group.id not in group_ids:
                group_ids.append(group.id)
        return group_ids

    def assign_groups_to_user(
        self, user_id: str, context: TenantContext, request: GroupAssignmentRequest
    ) -> GroupAssignmentResult:
        """
        Assign groups to a user within the user's tenant partition.

        The user's assigned_groups is replaced by the validated list in a
        single write, under a per-user lock. References that cannot be used
        in the user's partition are dropped with a warning; Home groups are
        swapped for same-named account groups where one exists.

        Args:
            user_id: User to update
            context: Tenant context of the request
            request: Single id, id list or group descriptors

        Returns:
            GroupAssignmentResult with the persisted ids, warnings and substitutions

        Raises:
            NotFoundException: If the user does not exist in the resolved partition
            ValidationFailedException: If a non-empty request yields no valid group
            ConflictException: If the user changed underneath this write
            StorageException: If the store fails
        """
        scope = self.resolver.resolve(context)

        with self.locks.hold((EntityKind.USER, scope.key, user_id)):
            user = self._get_user(scope, user_id)
            requested = self._normalize_request(user, scope, request)
            validation = self.validator.validate(requested, scope)

            if requested and not validation.valid_ids:
                raise ValidationFailedException(
                    f"None of the {len(requested)} requested groups can be assigned in {scope}",
                    validation.warnings,
                )

            if validation.valid_ids != user.assigned_groups:
                user.assigned_groups = validation.valid_ids
                self.stores.users.put(scope, user)
                logger.info(
                    "Assigned %d groups to user %s in %s (%d warnings, %d substitutions)",
                    len(validation.valid_ids),
                    user_id,
                    scope,
                    len(validation.warnings),
                    len(validation.substitutions),
                )

        return GroupAssignmentResult(
            assigned_groups=validation.valid_ids,
            warnings=validation.warnings,
            substitutions=validation.substitutions,
            duplicates_removed=validation.duplicates_removed,
        )

    def remove_groups_from_user(
        self, user_id: str, context: TenantContext, group_ids: list[str]
    ) -> list[str]:
        """
        Remove groups from a user (set subtraction, no validation).

        Removing ids the user does not have is a no-op.

        Returns:
            The user's remaining group ids
        """
        scope = self.resolver.resolve(context)
        to_remove = set(group_ids)

        with self.locks.hold((EntityKind.USER, scope.key, user_id)):
            user = self._get_user(scope, user_id)
            remaining = [g for g in user.assigned_groups if g not in to_remove]

            if remaining != user.assigned_groups:
                user.assigned_groups = remaining
                self.stores.users.put(scope, user)
                logger.info("Removed groups %s from user %s in %s", sorted(to_remove), user_id, scope)

        return remaining

    def get_user_groups(
        self, user_id: str, context: TenantContext
    ) -> tuple[list[GroupRecord], list[AssignmentWarning]]:
        """
        Resolve a user's assigned group ids to group records.

        Ids that no longer resolve in the user's partition are skipped and
        reported as dangling references.
        """
        scope = self.resolver.resolve(context)
        user = self._get_user(scope, user_id)

        groups: list[GroupRecord] = []
        warnings: list[AssignmentWarning] = []
        for group_id in user.assigned_groups:
            group = self.stores.groups.get_by_id_in_scope(scope, group_id)
            if group is None:
                warnings.append(
                    AssignmentWarning(
                        WarningCode.DANGLING_REFERENCE,
                        group_id,
                        f"Group {group_id} assigned to user {user_id} no longer exists in {scope}",
                    )
                )
                continue
            groups.append(group)

        return groups, warnings
