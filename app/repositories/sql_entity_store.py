"""SQLAlchemy-backed EntityStore."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConflictException, StorageException
from app.models.group import Group
from app.models.role import Role
from app.models.scope import Scope
from app.models.user import User
from app.repositories.entity_store import EntityKind, EntityStore, RecordT

logger = logging.getLogger(__name__)

MODELS_BY_KIND = {
    EntityKind.USER: User,
    EntityKind.GROUP: Group,
    EntityKind.ROLE: Role,
}


class SqlEntityStore(EntityStore[RecordT]):
    """Repository for one identity table, partitioned by scope_key"""

    def __init__(self, db: Session, kind: EntityKind):
        self.db = db
        self.kind = kind
        self.model = MODELS_BY_KIND[kind]

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        """Roll back and translate driver errors into engine exceptions"""
        try:
            yield
        except StaleDataError as e:
            self.db.rollback()
            raise ConflictException(
                f"{self.kind.value} was modified concurrently, reload and retry"
            ) from e
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictException(f"{self.kind.value} violates a uniqueness constraint") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Storage failure while trying to %s %s", action, self.kind.value)
            raise StorageException(f"Failed to {action} {self.kind.value}") from e

    def get_by_id(self, entity_id: str) -> RecordT | None:
        with self._storage_errors("read"):
            row = self.db.query(self.model).filter(self.model.id == entity_id).first()
            return row.to_record() if row else None

    def get_by_id_in_scope(self, scope: Scope, entity_id: str) -> RecordT | None:
        with self._storage_errors("read"):
            row = (
                self.db.query(self.model)
                .filter(self.model.id == entity_id, self.model.scope_key == scope.key)
                .first()
            )
            return row.to_record() if row else None

    def find_by_name_in_scope(self, scope: Scope, name: str) -> RecordT | None:
        name_column = getattr(self.model, self.model.name_column)
        with self._storage_errors("read"):
            row = (
                self.db.query(self.model)
                .filter(self.model.scope_key == scope.key, name_column == name)
                .first()
            )
            return row.to_record() if row else None

    def list_in_scope(self, scope: Scope) -> list[RecordT]:
        with self._storage_errors("list"):
            rows = (
                self.db.query(self.model)
                .filter(self.model.scope_key == scope.key)
                .order_by(self.model.created_at, self.model.id)
                .all()
            )
            return [row.to_record() for row in rows]

    def put(self, scope: Scope, record: RecordT) -> RecordT:
        """
        Insert or replace a record.

        The version comparison here catches writes based on an old read;
        SQLAlchemy's version_id_col catches a write that lands between this
        read and the commit.
        """
        record = replace(record, scope=scope)
        with self._storage_errors("write"):
            row = self.db.query(self.model).filter(self.model.id == record.id).first()
            if row is None:
                if record.version:
                    raise ConflictException(f"{self.kind.value} {record.id} no longer exists")
                row = self.model.from_record(record)
                self.db.add(row)
            else:
                if row.version != record.version:
                    raise ConflictException(
                        f"{self.kind.value} {record.id} is at version {row.version}, "
                        f"write was based on version {record.version}"
                    )
                row.apply_record(record)
            self.db.commit()
            self.db.refresh(row)
            return row.to_record()

    def delete(self, scope: Scope, entity_id: str) -> None:
        with self._storage_errors("delete"):
            row = (
                self.db.query(self.model)
                .filter(self.model.id == entity_id, self.model.scope_key == scope.key)
                .first()
            )
            if row is not None:
                self.db.delete(row)
                self.db.commit()
