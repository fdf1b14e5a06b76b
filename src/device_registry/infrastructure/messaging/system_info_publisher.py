"""Best-effort publisher for system info changes."""

from typing import Any

from device_registry.core.logging import get_logger
from device_registry.infrastructure.messaging.message_bus import MessageBus
from device_registry.infrastructure.messaging.messages import DeviceSystemInfoChanged

logger = get_logger(__name__)


class SystemInfoUpdatePublisher:
    """Publishes DeviceSystemInfoChanged without ever failing the caller.

    Used after the system info write has committed: a delivery problem is
    logged and dropped, never reported as a failed update.
    """

    def __init__(self, message_bus: MessageBus) -> None:
        self.message_bus = message_bus

    async def publish_safe(self, namespace: str, device_uuid: str, new_system_info: Any | None) -> bool:
        """Publish the change, absorbing any failure.

        Returns:
            True if the message was delivered.
        """
        try:
            await self.message_bus.publish(
                DeviceSystemInfoChanged(
                    namespace=namespace,
                    uuid=device_uuid,
                    new_system_info=new_system_info,
                )
            )
        except Exception as e:
            logger.error(
                "Could not publish system info change",
                namespace=namespace,
                device_uuid=device_uuid,
                error=str(e),
            )
            return False
        return True
