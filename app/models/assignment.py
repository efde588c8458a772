"""Result types produced by the assignment engine."""

from dataclasses import dataclass, field
from enum import Enum as PyEnum


class WarningCode(str, PyEnum):
    """Non-fatal reasons a requested group reference was dropped"""

    DANGLING_REFERENCE = "dangling-reference"
    SCOPE_MISMATCH_NO_ALTERNATIVE = "scope-mismatch-no-alternative"
    CROSS_ACCOUNT_REFERENCE = "cross-account-reference"


@dataclass(frozen=True)
class AssignmentWarning:
    code: WarningCode
    group_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True)
class Substitution:
    """A Home group reference replaced by the same-named account group"""

    original: str
    replacement: str
    name: str


@dataclass
class GroupValidationResult:
    valid_ids: list[str] = field(default_factory=list)
    warnings: list[AssignmentWarning] = field(default_factory=list)
    substitutions: list[Substitution] = field(default_factory=list)
    duplicates_removed: int = 0


@dataclass
class GroupAssignmentResult:
    assigned_groups: list[str]
    warnings: list[AssignmentWarning] = field(default_factory=list)
    substitutions: list[Substitution] = field(default_factory=list)
    duplicates_removed: int = 0


@dataclass
class RoleAssignmentResult:
    added: int
    total: int
