"""Domain entities for the Device Registry."""

from device_registry.domain.entities.device import ClientConfig, GroupDevice, NetworkInfo
from device_registry.domain.entities.group import Group, GroupType
from device_registry.domain.entities.page import Page, PageRequest
from device_registry.domain.entities.scope import (
    ALL_DEVICE_SCOPES,
    DEVICES_READ,
    DEVICES_WRITE,
    AuthorizedScope,
    Permission,
    ResourceKind,
    device_write_scope,
)

__all__ = [
    "ALL_DEVICE_SCOPES",
    "AuthorizedScope",
    "ClientConfig",
    "DEVICES_READ",
    "DEVICES_WRITE",
    "Group",
    "GroupDevice",
    "GroupType",
    "NetworkInfo",
    "Page",
    "PageRequest",
    "Permission",
    "ResourceKind",
    "device_write_scope",
]
