"""Request and response schemas of the HTTP API."""

from device_registry.infrastructure.api.schemas.group_schemas import (
    CreateGroupRequest,
    DevicePage,
    GroupDeviceResponse,
    GroupPage,
    GroupResponse,
)
from device_registry.infrastructure.api.schemas.system_info_schemas import (
    NetworkInfoRequest,
    NetworkInfoResponse,
)

__all__ = [
    "CreateGroupRequest",
    "DevicePage",
    "GroupDeviceResponse",
    "GroupPage",
    "GroupResponse",
    "NetworkInfoRequest",
    "NetworkInfoResponse",
]
