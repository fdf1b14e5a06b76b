"""Messages published when device state changes.

Every message is a validated, frozen Pydantic model. ``message_type`` is
the routing key subscribers match against; ``message_key`` (the device
uuid) keeps messages about one device in order on partitioned transports.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Base for all messages handed to the message bus."""

    model_config = ConfigDict(frozen=True)

    message_type: ClassVar[str] = "message"

    namespace: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message_key(self) -> str:
        return self.namespace

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready envelope sent over the wire."""
        return {
            "type": self.message_type,
            "key": self.message_key,
            "body": self.model_dump(mode="json"),
        }


class DeviceSystemInfoChanged(Message):
    """A device's reported system info (or network identity) changed.

    ``new_system_info`` is None when only the network identity changed.
    """

    message_type: ClassVar[str] = "device.system_info.changed"

    uuid: str
    new_system_info: Any | None = None

    @property
    def message_key(self) -> str:
        return self.uuid


class DeviceConfigChanged(Message):
    """A device uploaded the configuration its update client runs with."""

    message_type: ClassVar[str] = "device.config.changed"

    uuid: str
    polling_sec: int
    force_install_completion: bool
    pacman_type: str
    received_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message_key(self) -> str:
        return self.uuid
