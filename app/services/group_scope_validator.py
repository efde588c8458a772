import logging

from app.models.assignment import (
    AssignmentWarning,
    GroupValidationResult,
    Substitution,
    WarningCode,
)
from app.models.records import GroupRecord
from app.models.scope import Scope
from app.repositories.entity_store import EntityStore

logger = logging.getLogger(__name__)


class GroupScopeValidator:
    """Reconciles requested group ids against the partition they are assigned in"""

    def __init__(self, groups: EntityStore[GroupRecord]):
        self.groups = groups

    def validate(self, requested_ids: list[str], target_scope: Scope) -> GroupValidationResult:
        """
        Validate group references for assignment within target_scope.

        Per id, in input order:
        1. Unknown id -> dropped with a dangling-reference warning
        2. Group already in target_scope -> accepted
        3. Home group referenced from an account -> replaced by the account
           group with the same (case-sensitive) name, or dropped with a
           scope-mismatch-no-alternative warning
        4. Group in another account -> dropped with a
           cross-account-reference warning, never substituted

        Accepted ids are then deduplicated keeping first occurrence.

        Returns:
            GroupValidationResult whose valid_ids all live in target_scope
        """
        result = GroupValidationResult()
        accepted: list[str] = []

        for group_id in requested_ids:
            group = self.groups.get_by_id(group_id)

            if group is None:
                result.warnings.append(
                    AssignmentWarning(
                        WarningCode.DANGLING_REFERENCE,
                        group_id,
                        f"Group {group_id} does not exist",
                    )
                )
                logger.warning("Dropping dangling group reference %s", group_id)
                continue

            if group.scope == target_scope:
                accepted.append(group.id)
                continue

            if group.scope.is_home and not target_scope.is_home:
                alternative = self.groups.find_by_name_in_scope(target_scope, group.name)
                if alternative is None:
                    result.warnings.append(
                        AssignmentWarning(
                            WarningCode.SCOPE_MISMATCH_NO_ALTERNATIVE,
                            group_id,
                            f'Home group "{group.name}" ({group_id}) cannot be assigned in '
                            f"{target_scope} and no group with that name exists there",
                        )
                    )
                    logger.warning(
                        "No %s group named %r to replace Home group %s", target_scope, group.name, group_id
                    )
                    continue

                accepted.append(alternative.id)
                result.substitutions.append(
                    Substitution(original=group_id, replacement=alternative.id, name=group.name)
                )
                logger.info(
                    "Substituted Home group %s with %s group %s (%r)",
                    group_id,
                    target_scope,
                    alternative.id,
                    group.name,
                )
                continue

            result.warnings.append(
                AssignmentWarning(
                    WarningCode.CROSS_ACCOUNT_REFERENCE,
                    group_id,
                    f'Group "{group.name}" ({group_id}) belongs to {group.scope} '
                    f"and cannot be assigned in {target_scope}",
                )
            )
            logger.warning("Dropping cross-scope group reference %s (%s -> %s)", group_id, group.scope, target_scope)

        seen: set[str] = set()
        for group_id in accepted:
            if group_id in seen:
                result.duplicates_removed += 1
                continue
            seen.add(group_id)
            result.valid_ids.append(group_id)

        return result
