"""Group model for tenant-scoped user groups."""

from sqlalchemy import String, Integer, Text, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, ScopedMixin
from app.models.records import GroupRecord


class Group(Base, TimestampMixin, ScopedMixin):
    """
    Group of users inside one tenant partition.

    Groups in different partitions may share a name; such groups are
    treated as equivalents when a Home group is referenced from an account
    partition, but they stay distinct rows with their own assigned_roles.

    Constraints:
    - Unique(scope_key, name) - group names are unique per partition
    """

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    entity: Mapped[str | None] = mapped_column(String(255), nullable=True)
    product: Mapped[str | None] = mapped_column(String(255), nullable=True)
    service: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assigned_roles: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("scope_key", "name", name="uq_groups_scope_name"),
    )

    name_column = "name"

    @classmethod
    def from_record(cls, record: GroupRecord) -> "Group":
        group = cls(id=record.id)
        group.apply_record(record)
        return group

    def apply_record(self, record: GroupRecord) -> None:
        self.name = record.name
        self.description = record.description
        self.entity = record.entity
        self.product = record.product
        self.service = record.service
        self.assigned_roles = list(record.assigned_roles)
        self.assign_scope(record.scope)

    def to_record(self) -> GroupRecord:
        return GroupRecord(
            id=self.id,
            name=self.name,
            description=self.description,
            entity=self.entity,
            product=self.product,
            service=self.service,
            assigned_roles=list(self.assigned_roles or []),
            scope=self.scope,
            version=self.version,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name='{self.name}', scope={self.scope_key})>"
