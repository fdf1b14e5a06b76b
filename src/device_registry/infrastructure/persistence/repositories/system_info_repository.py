"""Repository for device system info and network identity."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.domain.entities.device import NetworkInfo
from device_registry.domain.errors import MissingSystemInfoError
from device_registry.infrastructure.persistence.models import SystemInfoModel


class SystemInfoRepository:
    """Repository for the device_system_info table.

    A row holds both the reported system info document and the network
    identity; either part may be recorded first.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, device_uuid: str) -> SystemInfoModel | None:
        result = await self.session.execute(
            select(SystemInfoModel).where(SystemInfoModel.device_uuid == device_uuid)
        )
        return result.scalar_one_or_none()

    async def find_by_uuid(self, device_uuid: str) -> Any:
        """Get the reported system info document.

        Raises:
            MissingSystemInfoError: If the device never reported one.
        """
        row = await self.get(device_uuid)
        if row is None or row.system_info is None:
            raise MissingSystemInfoError(device_uuid)
        return row.system_info

    async def upsert(self, device_uuid: str, data: Any) -> SystemInfoModel:
        """Store the system info document, replacing any previous one."""
        row = await self.get(device_uuid)
        if row is None:
            row = SystemInfoModel(device_uuid=device_uuid, system_info=data)
            self.session.add(row)
        else:
            row.system_info = data
        await self.session.flush()
        return row

    async def get_network_info(self, device_uuid: str) -> NetworkInfo:
        """Get the reported network identity.

        Raises:
            MissingSystemInfoError: If the device never reported one.
        """
        row = await self.get(device_uuid)
        if row is None or not row.has_network_info:
            raise MissingSystemInfoError(device_uuid)
        return NetworkInfo(
            device_uuid=device_uuid,
            local_ipv4=row.local_ipv4 or "",
            hostname=row.hostname or "",
            mac_address=row.mac_address or "",
        )

    async def set_network_info(self, info: NetworkInfo) -> SystemInfoModel:
        """Store the network identity, keeping any system info document."""
        row = await self.get(info.device_uuid)
        if row is None:
            row = SystemInfoModel(device_uuid=info.device_uuid)
            self.session.add(row)
        row.local_ipv4 = info.local_ipv4
        row.hostname = info.hostname
        row.mac_address = info.mac_address
        await self.session.flush()
        return row
