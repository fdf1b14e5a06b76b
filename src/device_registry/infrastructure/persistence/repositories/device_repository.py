"""Repository for device directory lookups."""

from typing import AsyncIterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.infrastructure.persistence.models import DeviceModel, SystemInfoModel

# Rows fetched per round trip while scanning a namespace
SCAN_BATCH_SIZE = 500


class DeviceRepository:
    """Repository for device database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_namespace(self, device_uuid: str) -> str | None:
        """Get the namespace owning a device, without loading the row."""
        result = await self.session.execute(
            select(DeviceModel.namespace).where(DeviceModel.uuid == device_uuid)
        )
        return result.scalar_one_or_none()

    async def scan_namespace(
        self, namespace: str
    ) -> AsyncIterator[tuple[DeviceModel, SystemInfoModel | None]]:
        """Stream every device of a namespace with its system info.

        Devices are yielded ordered by device_id, then uuid.
        """
        stmt = (
            select(DeviceModel, SystemInfoModel)
            .outerjoin(SystemInfoModel, SystemInfoModel.device_uuid == DeviceModel.uuid)
            .where(DeviceModel.namespace == namespace)
            .order_by(DeviceModel.device_id, DeviceModel.uuid)
            .execution_options(yield_per=SCAN_BATCH_SIZE)
        )
        result = await self.session.stream(stmt)
        async for device, system_info in result:
            yield device, system_info
