"""Process-local EntityStore for development and tests."""

import copy
import threading
from dataclasses import replace
from datetime import datetime, UTC

from app.core.exceptions import ConflictException
from app.models.scope import Scope
from app.repositories.entity_store import EntityKind, EntityStore, RecordT


class MemoryEntityStore(EntityStore[RecordT]):
    """
    Dictionary-backed store keyed by record id.

    Records are deep-copied on the way in and out so callers never share
    state with the store. Group names are unique per partition, matching
    the relational schema.
    """

    def __init__(self, kind: EntityKind):
        self.kind = kind
        self._records: dict[str, RecordT] = {}
        self._lock = threading.Lock()

    def get_by_id(self, entity_id: str) -> RecordT | None:
        with self._lock:
            record = self._records.get(entity_id)
            return copy.deepcopy(record) if record else None

    def get_by_id_in_scope(self, scope: Scope, entity_id: str) -> RecordT | None:
        with self._lock:
            record = self._records.get(entity_id)
            if record is None or record.scope != scope:
                return None
            return copy.deepcopy(record)

    def find_by_name_in_scope(self, scope: Scope, name: str) -> RecordT | None:
        with self._lock:
            for record in self._records.values():
                if record.scope == scope and record.lookup_name == name:
                    return copy.deepcopy(record)
            return None

    def list_in_scope(self, scope: Scope) -> list[RecordT]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._records.values() if r.scope == scope]

    def put(self, scope: Scope, record: RecordT) -> RecordT:
        now = datetime.now(UTC)
        with self._lock:
            existing = self._records.get(record.id)
            if existing is None and record.version:
                raise ConflictException(f"{self.kind.value} {record.id} no longer exists")
            if existing is not None and existing.version != record.version:
                raise ConflictException(
                    f"{self.kind.value} {record.id} is at version {existing.version}, "
                    f"write was based on version {record.version}"
                )
            if self.kind != EntityKind.ROLE:
                for other in self._records.values():
                    if (
                        other.id != record.id
                        and other.scope == scope
                        and other.lookup_name == record.lookup_name
                    ):
                        raise ConflictException(f"{self.kind.value} violates a uniqueness constraint")

            stored = replace(
                copy.deepcopy(record),
                scope=scope,
                version=record.version + 1,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            self._records[record.id] = stored
            return copy.deepcopy(stored)

    def delete(self, scope: Scope, entity_id: str) -> None:
        with self._lock:
            record = self._records.get(entity_id)
            if record is not None and record.scope == scope:
                del self._records[entity_id]
