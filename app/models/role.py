"""Role model for tenant-scoped roles."""

from typing import Any
from sqlalchemy import String, Integer, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, ScopedMixin
from app.models.records import RoleRecord


class Role(Base, TimestampMixin, ScopedMixin):
    """
    Role attached to groups.

    scope_config is the capability map consumed by the permission layer,
    e.g. {"pipelines": [{"resource": "build", "view": true}]}. It is stored
    and returned as-is.
    """

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    scope_config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    name_column = "name"

    @classmethod
    def from_record(cls, record: RoleRecord) -> "Role":
        role = cls(id=record.id)
        role.apply_record(record)
        return role

    def apply_record(self, record: RoleRecord) -> None:
        self.name = record.name
        self.description = record.description
        self.scope_config = dict(record.scope_config)
        self.assign_scope(record.scope)

    def to_record(self) -> RoleRecord:
        return RoleRecord(
            id=self.id,
            name=self.name,
            description=self.description,
            scope_config=dict(self.scope_config or {}),
            scope=self.scope,
            version=self.version,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name}', scope={self.scope_key})>"
