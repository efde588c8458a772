"""create_identity_tables

Revision ID: 3f9b2c7d41e8
Revises:
Create Date: 2026-10-18 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9b2c7d41e8'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _scope_columns() -> list[sa.Column]:
    return [
        sa.Column('scope_key', sa.String(length=512), nullable=False),
        sa.Column('account_id', sa.String(length=255), nullable=True),
        sa.Column('account_name', sa.String(length=255), nullable=True),
        sa.Column('enterprise_id', sa.String(length=255), nullable=True),
        sa.Column('enterprise_name', sa.String(length=255), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Create the tenant-partitioned identity tables.

    Creates:
    - users (assigned_groups JSON list)
    - groups (assigned_roles JSON list, name unique per partition)
    - roles (opaque scope_config JSON)

    Every table carries the partition columns (scope_key plus the
    account/enterprise fields it is derived from) and a version column
    used for optimistic locking.
    """
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('middle_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('email_address', sa.String(length=320), nullable=False),
        sa.Column('status', sa.String(length=8), nullable=False),
        sa.Column('technical_user', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('assigned_groups', sa.JSON(), nullable=False),
        *_scope_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('scope_key', 'email_address', name='uq_users_scope_email'),
    )

    op.create_table(
        'groups',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('entity', sa.String(length=255), nullable=True),
        sa.Column('product', sa.String(length=255), nullable=True),
        sa.Column('service', sa.String(length=255), nullable=True),
        sa.Column('assigned_roles', sa.JSON(), nullable=False),
        *_scope_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('scope_key', 'name', name='uq_groups_scope_name'),
    )

    op.create_table(
        'roles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scope_config', sa.JSON(), nullable=False),
        *_scope_columns(),
        sa.PrimaryKeyConstraint('id'),
    )

    # Every scoped query filters on scope_key
    op.create_index('ix_users_scope_key', 'users', ['scope_key'])
    op.create_index('ix_users_email_address', 'users', ['email_address'])
    op.create_index('ix_groups_scope_key', 'groups', ['scope_key'])
    op.create_index('ix_roles_scope_key', 'roles', ['scope_key'])


def downgrade() -> None:
    """
    Drop the identity tables.

    WARNING: This deletes all users, groups, roles and their assignments.
    """
    op.drop_index('ix_roles_scope_key', table_name='roles')
    op.drop_index('ix_groups_scope_key', table_name='groups')
    op.drop_index('ix_users_email_address', table_name='users')
    op.drop_index('ix_users_scope_key', table_name='users')

    op.drop_table('roles')
    op.drop_table('groups')
    op.drop_table('users')
