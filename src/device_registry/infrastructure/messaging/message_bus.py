"""Message bus implementations.

The in-memory bus fans messages out to in-process subscribers and is used
when no external transport is configured. The HTTP bus hands each message
to a broker endpoint. Both raise MessagePublishError when a message could
not be delivered; callers decide whether that failure is surfaced.
"""

import asyncio
import fnmatch
from typing import Awaitable, Callable, Protocol, runtime_checkable

import httpx

from device_registry.core.config import Settings
from device_registry.core.logging import get_logger
from device_registry.domain.errors import MessagePublishError
from device_registry.infrastructure.messaging.messages import Message

logger = get_logger(__name__)

MessageHandler = Callable[[Message], Awaitable[None]]


@runtime_checkable
class MessageBus(Protocol):
    """Protocol for publishing messages to downstream consumers."""

    async def publish(self, message: Message) -> None:
        """Publish a message.

        Raises:
            MessagePublishError: If the message could not be delivered.
        """
        ...


class InMemoryMessageBus:
    """In-process message bus with glob-pattern subscriptions.

    Usage:
        bus = InMemoryMessageBus()
        bus.subscribe("device.*", handler)
        await bus.publish(DeviceSystemInfoChanged(namespace="acme", uuid=uuid))
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[str, MessageHandler]] = []

    def subscribe(self, pattern: str, handler: MessageHandler) -> None:
        """Register a handler for message types matching ``pattern``."""
        self._subscribers.append((pattern, handler))
        logger.debug("Message handler subscribed", pattern=pattern)

    async def publish(self, message: Message) -> None:
        """Deliver a message to every matching subscriber concurrently.

        All subscribers run even if some fail; failures are reported
        together afterwards.

        Raises:
            MessagePublishError: If any subscriber raised.
        """
        handlers = [
            handler
            for pattern, handler in self._subscribers
            if fnmatch.fnmatch(message.message_type, pattern)
        ]
        if not handlers:
            logger.debug("No subscribers for message", message_type=message.message_type)
            return

        results = await asyncio.gather(
            *[handler(message) for handler in handlers],
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, Exception)]
        if failures:
            for failure in failures:
                logger.error(
                    "Message subscriber failed",
                    message_type=message.message_type,
                    error=str(failure),
                )
            raise MessagePublishError(
                f"{len(failures)} subscriber(s) failed for '{message.message_type}'"
            )


class HttpMessageBus:
    """Message bus that POSTs each message to a broker endpoint."""

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.AsyncClient | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client

    async def publish(self, message: Message) -> None:
        """POST the message envelope as JSON.

        Raises:
            MessagePublishError: On transport errors or a non-2xx response.
        """
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=message.to_payload(), timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=message.to_payload())
        except httpx.HTTPError as e:
            raise MessagePublishError(
                f"Could not deliver '{message.message_type}': {e}"
            ) from e

        if not response.is_success:
            raise MessagePublishError(
                f"Broker rejected '{message.message_type}' with HTTP {response.status_code}"
            )

        logger.debug(
            "Message published",
            message_type=message.message_type,
            message_key=message.message_key,
        )


def build_message_bus(settings: Settings) -> MessageBus:
    """Create the message bus the settings select."""
    if settings.message_bus_url:
        logger.info("Using HTTP message bus", url=settings.message_bus_url)
        return HttpMessageBus(settings.message_bus_url, timeout=settings.message_bus_timeout_seconds)

    logger.info("Using in-memory message bus")
    return InMemoryMessageBus()
