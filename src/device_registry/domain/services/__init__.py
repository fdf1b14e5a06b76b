"""Domain services for the Device Registry.

Services hold the membership, authorization and system info logic.
They read and write through repositories and never commit.
"""

from device_registry.domain.services.authorization_guard import AuthorizationGuard
from device_registry.domain.services.group_membership import (
    GroupMembership,
    build_attribute_view,
)
from device_registry.domain.services.group_registry import GroupRegistry, validate_expression
from device_registry.domain.services.system_info_service import (
    SystemInfoService,
    parse_client_config,
)

__all__ = [
    "AuthorizationGuard",
    "GroupMembership",
    "GroupRegistry",
    "SystemInfoService",
    "build_attribute_view",
    "parse_client_config",
    "validate_expression",
]
