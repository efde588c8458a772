"""Selects the EntityStore backend once, from settings."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.config import settings
from app.models.records import GroupRecord, RoleRecord, UserRecord
from app.repositories.entity_store import EntityKind, EntityStore
from app.repositories.memory_entity_store import MemoryEntityStore
from app.repositories.sql_entity_store import SqlEntityStore


@dataclass
class IdentityStores:
    """The three stores the assignment engine works against"""

    users: EntityStore[UserRecord]
    groups: EntityStore[GroupRecord]
    roles: EntityStore[RoleRecord]


def sql_stores(db: Session) -> IdentityStores:
    return IdentityStores(
        users=SqlEntityStore(db, EntityKind.USER),
        groups=SqlEntityStore(db, EntityKind.GROUP),
        roles=SqlEntityStore(db, EntityKind.ROLE),
    )


def memory_stores() -> IdentityStores:
    return IdentityStores(
        users=MemoryEntityStore(EntityKind.USER),
        groups=MemoryEntityStore(EntityKind.GROUP),
        roles=MemoryEntityStore(EntityKind.ROLE),
    )


# Shared by every request when STORAGE_MODE=memory
_memory_stores = memory_stores()


def build_stores(db: Session) -> IdentityStores:
    """
    Build the stores for one request.

    STORAGE_MODE is read from settings at process start; the engine itself
    never inspects it.
    """
    if settings.STORAGE_MODE == "memory":
        return _memory_stores
    return sql_stores(db)
