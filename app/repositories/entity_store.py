"""Storage contract consumed by the assignment engine."""

from abc import ABC, abstractmethod
from enum import Enum as PyEnum
from typing import Generic, TypeVar

from app.models.records import GroupRecord, RoleRecord, UserRecord
from app.models.scope import Scope

RecordT = TypeVar("RecordT", UserRecord, GroupRecord, RoleRecord)


class EntityKind(str, PyEnum):
    """Entity kinds that live in tenant partitions"""

    USER = "user"
    GROUP = "group"
    ROLE = "role"


class EntityStore(ABC, Generic[RecordT]):
    """
    Per-kind persistence for tenant-scoped identity records.

    Every write is a single-record put; no multi-key transaction is
    assumed. put() rejects a record whose version no longer matches the
    stored one so that concurrent read-modify-write cycles cannot silently
    overwrite each other.
    """

    kind: EntityKind

    @abstractmethod
    def get_by_id(self, entity_id: str) -> RecordT | None:
        """Look up a record by id in any partition"""

    @abstractmethod
    def get_by_id_in_scope(self, scope: Scope, entity_id: str) -> RecordT | None:
        """Look up a record by id, only if it lives in the given partition"""

    @abstractmethod
    def find_by_name_in_scope(self, scope: Scope, name: str) -> RecordT | None:
        """Case-sensitive exact name match within one partition"""

    @abstractmethod
    def list_in_scope(self, scope: Scope) -> list[RecordT]:
        """All records of this kind in one partition"""

    @abstractmethod
    def put(self, scope: Scope, record: RecordT) -> RecordT:
        """
        Insert or fully replace a record in the given partition.

        Returns:
            The stored record with its new version

        Raises:
            ConflictException: If record.version is stale or a uniqueness
                constraint is violated
            StorageException: If the backend fails
        """

    @abstractmethod
    def delete(self, scope: Scope, entity_id: str) -> None:
        """Delete a record from the given partition (no-op if absent)"""
