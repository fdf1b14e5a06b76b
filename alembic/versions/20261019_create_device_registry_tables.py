"""create_device_registry_tables

Revision ID: 3f9a1c2d7b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7b40'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('devices',
        sa.Column('uuid', sa.String(length=36), nullable=False, comment='Device UUID'),
        sa.Column('namespace', sa.String(length=255), nullable=False, comment='Owning namespace'),
        sa.Column('device_id', sa.String(length=200), nullable=False, comment='External device identifier'),
        sa.Column('device_name', sa.String(length=200), nullable=True),
        sa.Column('device_type', sa.String(length=100), nullable=True),
        sa.Column('attributes', sa.JSON(), nullable=False, comment='Attributes matched by dynamic group expressions'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('uuid'),
        sa.UniqueConstraint('namespace', 'device_id', name='uq_devices_namespace_device_id')
    )
    with op.batch_alter_table('devices', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_devices_namespace'), ['namespace'], unique=False)
        batch_op.create_index('ix_devices_namespace_device_id', ['namespace', 'device_id'], unique=False)

    op.create_table('device_groups',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Group ID (UUID)'),
        sa.Column('namespace', sa.String(length=255), nullable=False, comment='Owning namespace'),
        sa.Column('name', sa.String(length=200), nullable=False, comment='Group name'),
        sa.Column('group_type', sa.String(length=16), nullable=False, comment='static or dynamic'),
        sa.Column('expression', sa.Text(), nullable=True, comment='Membership expression of a dynamic group'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('namespace', 'name', name='uq_device_groups_namespace_name')
    )
    with op.batch_alter_table('device_groups', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_device_groups_namespace'), ['namespace'], unique=False)
        batch_op.create_index('ix_device_groups_namespace_name', ['namespace', 'name'], unique=False)

    op.create_table('group_members',
        sa.Column('group_id', sa.String(length=36), nullable=False, comment='Foreign key to device_groups table'),
        sa.Column('device_uuid', sa.String(length=36), nullable=False, comment='Foreign key to devices table'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['device_groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['device_uuid'], ['devices.uuid'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('group_id', 'device_uuid')
    )
    with op.batch_alter_table('group_members', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_group_members_device_uuid'), ['device_uuid'], unique=False)

    op.create_table('device_system_info',
        sa.Column('device_uuid', sa.String(length=36), nullable=False, comment='Foreign key to devices table'),
        sa.Column('system_info', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('local_ipv4', sa.String(length=64), nullable=True),
        sa.Column('mac_address', sa.String(length=64), nullable=True),
        sa.Column('hostname', sa.String(length=255), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['device_uuid'], ['devices.uuid'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('device_uuid')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('device_system_info')

    with op.batch_alter_table('group_members', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_group_members_device_uuid'))
    op.drop_table('group_members')

    with op.batch_alter_table('device_groups', schema=None) as batch_op:
        batch_op.drop_index('ix_device_groups_namespace_name')
        batch_op.drop_index(batch_op.f('ix_device_groups_namespace'))
    op.drop_table('device_groups')

    with op.batch_alter_table('devices', schema=None) as batch_op:
        batch_op.drop_index('ix_devices_namespace_device_id')
        batch_op.drop_index(batch_op.f('ix_devices_namespace'))
    op.drop_table('devices')
