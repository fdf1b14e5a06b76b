"""Repository for group and static membership database operations."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.infrastructure.persistence.models import (
    DeviceModel,
    GroupMemberModel,
    GroupModel,
)


class GroupRepository:
    """Repository for group database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, group: GroupModel) -> GroupModel:
        """Create a new group.

        Args:
            group: Group model to create.

        Returns:
            Created group model.
        """
        self.session.add(group)
        await self.session.flush()
        return group

    async def get_by_id(self, group_id: str) -> GroupModel | None:
        """Get a group by ID."""
        result = await self.session.execute(
            select(GroupModel).where(GroupModel.id == group_id)
        )
        return result.scalar_one_or_none()

    async def get_namespace(self, group_id: str) -> str | None:
        """Get the namespace owning a group, without loading the row."""
        result = await self.session.execute(
            select(GroupModel.namespace).where(GroupModel.id == group_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name_and_namespace(self, name: str, namespace: str) -> GroupModel | None:
        """Get a group by its exact name within a namespace."""
        result = await self.session.execute(
            select(GroupModel).where(
                (GroupModel.name == name) & (GroupModel.namespace == namespace)
            )
        )
        return result.scalar_one_or_none()

    async def list(self, namespace: str, offset: int, limit: int) -> list[GroupModel]:
        """List groups of a namespace ordered by name, then id.

        Args:
            namespace: Owning namespace.
            offset: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            List of group models.
        """
        result = await self.session.execute(
            select(GroupModel)
            .where(GroupModel.namespace == namespace)
            .order_by(GroupModel.name, GroupModel.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self, namespace: str) -> int:
        """Count groups of a namespace."""
        result = await self.session.execute(
            select(func.count()).select_from(GroupModel).where(GroupModel.namespace == namespace)
        )
        return result.scalar_one()

    async def update(self, group: GroupModel) -> GroupModel:
        """Flush changes made to a group."""
        if group not in self.session:
            self.session.add(group)

        await self.session.flush()
        return group

    async def add_member(self, group_id: str, device_uuid: str) -> bool:
        """Add a device to a static group.

        Adding a device that is already a member is a no-op.

        Returns:
            True if a membership row was inserted.
        """
        if self.session.get_bind().dialect.name == "postgresql":
            insert = postgresql_insert
        else:
            insert = sqlite_insert

        # Concurrent adds of the same pair both succeed; only one row is written
        result = await self.session.execute(
            insert(GroupMemberModel)
            .values(group_id=group_id, device_uuid=device_uuid)
            .on_conflict_do_nothing(index_elements=["group_id", "device_uuid"])
        )
        await self.session.flush()
        return result.rowcount > 0

    async def remove_member(self, group_id: str, device_uuid: str) -> bool:
        """Remove a device from a static group.

        Returns:
            True if a membership row was deleted.
        """
        result = await self.session.execute(
            delete(GroupMemberModel).where(
                (GroupMemberModel.group_id == group_id)
                & (GroupMemberModel.device_uuid == device_uuid)
            )
        )
        await self.session.flush()
        return result.rowcount > 0

    async def list_members(self, group_id: str, offset: int, limit: int) -> list[tuple[str, str]]:
        """List (uuid, device_id) of static members ordered by device_id, then uuid.

        Membership rows whose device no longer exists are skipped by the join.
        """
        result = await self.session.execute(
            select(DeviceModel.uuid, DeviceModel.device_id)
            .join(GroupMemberModel, GroupMemberModel.device_uuid == DeviceModel.uuid)
            .where(GroupMemberModel.group_id == group_id)
            .order_by(DeviceModel.device_id, DeviceModel.uuid)
            .offset(offset)
            .limit(limit)
        )
        return [(row.uuid, row.device_id) for row in result]

    async def count_members(self, group_id: str) -> int:
        """Count static members that still exist in the device directory."""
        result = await self.session.execute(
            select(func.count())
            .select_from(GroupMemberModel)
            .join(DeviceModel, GroupMemberModel.device_uuid == DeviceModel.uuid)
            .where(GroupMemberModel.group_id == group_id)
        )
        return result.scalar_one()
