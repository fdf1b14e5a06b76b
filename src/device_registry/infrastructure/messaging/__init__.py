"""Message bus and messages describing device changes."""

from device_registry.infrastructure.messaging.message_bus import (
    HttpMessageBus,
    InMemoryMessageBus,
    MessageBus,
    MessageHandler,
    build_message_bus,
)
from device_registry.infrastructure.messaging.messages import (
    DeviceConfigChanged,
    DeviceSystemInfoChanged,
    Message,
)
from device_registry.infrastructure.messaging.system_info_publisher import (
    SystemInfoUpdatePublisher,
)

__all__ = [
    "DeviceConfigChanged",
    "DeviceSystemInfoChanged",
    "HttpMessageBus",
    "InMemoryMessageBus",
    "Message",
    "MessageBus",
    "MessageHandler",
    "SystemInfoUpdatePublisher",
    "build_message_bus",
]
