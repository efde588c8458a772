from datetime import date
from sqlalchemy import String, Boolean, Date, Integer, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, ScopedMixin
from app.models.records import UserRecord, UserStatus


class User(Base, TimestampMixin, ScopedMixin):
    """
    Platform user living in exactly one tenant partition.

    assigned_groups holds Group ids from the same partition and is always
    written as a complete list. The version column makes SQLAlchemy reject
    an UPDATE whose base version is stale.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email_address: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, native_enum=False), nullable=False, default=UserStatus.ACTIVE
    )
    technical_user: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    assigned_groups: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("scope_key", "email_address", name="uq_users_scope_email"),
    )

    # Column used by EntityStore.find_by_name_in_scope
    name_column = "email_address"

    @classmethod
    def from_record(cls, record: UserRecord) -> "User":
        user = cls(id=record.id)
        user.apply_record(record)
        return user

    def apply_record(self, record: UserRecord) -> None:
        """Copy mutable fields from a record (id, version and timestamps excluded)"""
        self.first_name = record.first_name
        self.middle_name = record.middle_name
        self.last_name = record.last_name
        self.email_address = record.email_address
        self.status = record.status
        self.technical_user = record.technical_user
        self.start_date = record.start_date
        self.end_date = record.end_date
        self.assigned_groups = list(record.assigned_groups)
        self.assign_scope(record.scope)

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=self.id,
            first_name=self.first_name,
            middle_name=self.middle_name,
            last_name=self.last_name,
            email_address=self.email_address,
            status=self.status,
            technical_user=self.technical_user,
            start_date=self.start_date,
            end_date=self.end_date,
            assigned_groups=list(self.assigned_groups or []),
            scope=self.scope,
            version=self.version,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email_address}', scope={self.scope_key})>"
