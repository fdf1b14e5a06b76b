"""Domain errors raised by the registry services.

Each error carries the HTTP status and machine-readable code the API
layer renders; services never import FastAPI to signal failures.
"""


class DeviceRegistryError(Exception):
    """Base class for all per-request registry failures."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DeviceRegistryError):
    status_code = 404
    code = "missing_entity"


class GroupNotFoundError(NotFoundError):
    def __init__(self, group_id: str) -> None:
        self.group_id = group_id
        super().__init__(f"Group '{group_id}' not found")


class DeviceNotFoundError(NotFoundError):
    def __init__(self, device_uuid: str) -> None:
        self.device_uuid = device_uuid
        super().__init__(f"Device '{device_uuid}' not found")


class MissingSystemInfoError(NotFoundError):
    code = "missing_system_info"

    def __init__(self, device_uuid: str) -> None:
        self.device_uuid = device_uuid
        super().__init__(f"No system info recorded for device '{device_uuid}'")


class ForbiddenError(DeviceRegistryError):
    """Caller's namespace or permissions do not cover the requested resource."""

    status_code = 403
    code = "forbidden"


class DuplicateNameError(DeviceRegistryError):
    status_code = 400
    code = "conflicting_entity"

    def __init__(self, name: str, namespace: str) -> None:
        self.name = name
        self.namespace = namespace
        super().__init__(f"A group named '{name}' already exists in namespace '{namespace}'")


class InvalidExpressionError(DeviceRegistryError):
    status_code = 400
    code = "invalid_group_expression"


class GroupTypeMismatchError(DeviceRegistryError):
    """Membership of a dynamic group is derived and cannot be assigned."""

    status_code = 409
    code = "group_type_mismatch"

    def __init__(self, group_id: str) -> None:
        self.group_id = group_id
        super().__init__(f"Group '{group_id}' is dynamic; its members cannot be added or removed")


class MalformedPayloadError(DeviceRegistryError):
    status_code = 400
    code = "malformed_input"


class MessagePublishError(DeviceRegistryError):
    """A message could not be handed to the message bus.

    When raised after a committed write, the state change has happened and
    only the notification is uncertain; retrying the request is safe.
    """

    status_code = 503
    code = "message_publish_failed"
