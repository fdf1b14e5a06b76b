"""Group membership engine.

Static groups keep their members in the group_members table. Dynamic
groups store no membership at all: every read scans the devices of the
group's namespace and keeps the ones whose attribute view satisfies the
group expression, so a device appears or disappears as soon as its
attributes change.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.expressions import Node, evaluate_expression, parse_expression
from device_registry.core.logging import LoggingContext, get_logger
from device_registry.domain.entities.device import GroupDevice, NetworkInfo
from device_registry.domain.entities.group import Group, GroupType
from device_registry.domain.entities.page import Page
from device_registry.domain.errors import DeviceNotFoundError, GroupTypeMismatchError
from device_registry.domain.services.group_registry import GroupRegistry
from device_registry.infrastructure.persistence.models import DeviceModel, SystemInfoModel
from device_registry.infrastructure.persistence.repositories import (
    DeviceRepository,
    GroupRepository,
)

logger = get_logger(__name__)


def build_attribute_view(device: DeviceModel, system_info: SystemInfoModel | None) -> dict[str, Any]:
    """Attributes a dynamic group expression is evaluated against.

    The device's free-form attributes come first; the well-known keys
    (``device_id``, ``device_name``, ``device_type``, ``system_info`` and
    ``network``) override attributes of the same name.
    """
    view: dict[str, Any] = dict(device.attributes or {})
    view["device_id"] = device.device_id
    view["device_name"] = device.device_name
    view["device_type"] = device.device_type
    view["system_info"] = {}

    if system_info is not None:
        if system_info.system_info is not None:
            view["system_info"] = system_info.system_info
        if system_info.has_network_info:
            view["network"] = NetworkInfo(
                device_uuid=device.uuid,
                local_ipv4=system_info.local_ipv4 or "",
                hostname=system_info.hostname or "",
                mac_address=system_info.mac_address or "",
            ).as_attributes()

    return view


class GroupMembership:
    """Facade over group creation and membership of both group types."""

    def __init__(self, session: AsyncSession) -> None:
        self.registry = GroupRegistry(session)
        self.group_repository = GroupRepository(session)
        self.device_repository = DeviceRepository(session)

    async def create(
        self,
        name: str,
        namespace: str,
        group_type: GroupType,
        expression: str | None = None,
    ) -> str:
        """Create a group; see GroupRegistry.create."""
        return await self.registry.create(name, namespace, group_type, expression)

    async def list_devices(
        self,
        group_id: str,
        offset: int | None = None,
        limit: int | None = None,
        include_device_id: bool = False,
    ) -> Page[GroupDevice] | Page[str]:
        """List the devices of a group ordered by device_id, then uuid.

        Args:
            group_id: Group to list.
            offset: Number of devices to skip.
            limit: Page size; defaults and bounds come from settings.
            include_device_id: Return GroupDevice values instead of bare uuids.

        Raises:
            GroupNotFoundError: If the group does not exist.
            MalformedPayloadError: If offset or limit is negative.
        """
        group = await self.registry.get(group_id)
        page = self.registry.page_request(offset, limit)

        with LoggingContext(namespace=group.namespace, group_id=group.id):
            if group.is_dynamic:
                matches = await self._match_dynamic(group)
                total = len(matches)
                members = matches[page.offset : page.offset + page.limit]
            else:
                total = await self.group_repository.count_members(group.id)
                rows = await self.group_repository.list_members(group.id, page.offset, page.limit)
                members = [GroupDevice(uuid=uuid, device_id=device_id) for uuid, device_id in rows]

            logger.debug(
                "Listed group devices",
                group_type=group.group_type.value,
                total=total,
                returned=len(members),
            )

        values: list[Any] = members if include_device_id else [member.uuid for member in members]
        return Page(total=total, offset=page.offset, limit=page.limit, values=values)

    async def count_devices(self, group_id: str) -> int:
        """Count the devices of a group.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        group = await self.registry.get(group_id)
        if group.is_dynamic:
            return await self._count_dynamic(group)
        return await self.group_repository.count_members(group.id)

    async def add_group_member(self, group_id: str, device_uuid: str) -> None:
        """Add a device to a static group. Adding a current member is a no-op.

        Raises:
            GroupNotFoundError: If the group does not exist.
            DeviceNotFoundError: If the device does not exist in the group's namespace.
            GroupTypeMismatchError: If the group is dynamic.
        """
        group = await self._mutable_group(group_id, device_uuid)
        inserted = await self.group_repository.add_member(group.id, device_uuid)
        logger.info(
            "Group member added" if inserted else "Device already a group member",
            group_id=group.id,
            device_uuid=device_uuid,
        )

    async def remove_group_member(self, group_id: str, device_uuid: str) -> None:
        """Remove a device from a static group. Removing a non-member is a no-op.

        Raises:
            GroupNotFoundError: If the group does not exist.
            DeviceNotFoundError: If the device does not exist in the group's namespace.
            GroupTypeMismatchError: If the group is dynamic.
        """
        group = await self._mutable_group(group_id, device_uuid)
        removed = await self.group_repository.remove_member(group.id, device_uuid)
        logger.info(
            "Group member removed" if removed else "Device was not a group member",
            group_id=group.id,
            device_uuid=device_uuid,
        )

    async def _mutable_group(self, group_id: str, device_uuid: str) -> Group:
        group = await self.registry.get(group_id)

        device_namespace = await self.device_repository.get_namespace(device_uuid)
        if device_namespace is None or device_namespace != group.namespace:
            raise DeviceNotFoundError(device_uuid)

        if group.is_dynamic:
            raise GroupTypeMismatchError(group.id)
        return group

    async def _match_dynamic(self, group: Group) -> list[GroupDevice]:
        predicate = self._predicate(group)
        matches: list[GroupDevice] = []
        async for device, system_info in self.device_repository.scan_namespace(group.namespace):
            if evaluate_expression(predicate, build_attribute_view(device, system_info)):
                matches.append(GroupDevice(uuid=device.uuid, device_id=device.device_id))
        return matches

    async def _count_dynamic(self, group: Group) -> int:
        predicate = self._predicate(group)
        count = 0
        async for device, system_info in self.device_repository.scan_namespace(group.namespace):
            if evaluate_expression(predicate, build_attribute_view(device, system_info)):
                count += 1
        return count

    @staticmethod
    def _predicate(group: Group) -> Node:
        # Expressions are validated on creation, so a stored one always parses
        return parse_expression(group.expression or "")
