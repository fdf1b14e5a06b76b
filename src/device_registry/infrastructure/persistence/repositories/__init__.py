"""Repositories for database access."""

from device_registry.infrastructure.persistence.repositories.device_repository import (
    DeviceRepository,
)
from device_registry.infrastructure.persistence.repositories.group_repository import (
    GroupRepository,
)
from device_registry.infrastructure.persistence.repositories.system_info_repository import (
    SystemInfoRepository,
)

__all__ = [
    "DeviceRepository",
    "GroupRepository",
    "SystemInfoRepository",
]
