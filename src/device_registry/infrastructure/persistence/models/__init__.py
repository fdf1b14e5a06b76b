"""SQLAlchemy models for the Device Registry."""

from device_registry.infrastructure.persistence.models.device import DeviceModel
from device_registry.infrastructure.persistence.models.group import GroupModel
from device_registry.infrastructure.persistence.models.group_member import GroupMemberModel
from device_registry.infrastructure.persistence.models.system_info import SystemInfoModel

__all__ = [
    "DeviceModel",
    "GroupMemberModel",
    "GroupModel",
    "SystemInfoModel",
]
