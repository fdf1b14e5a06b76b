"""System info service: documents and network identity devices report."""

import tomllib
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.logging import get_logger
from device_registry.domain.entities.device import ClientConfig, NetworkInfo
from device_registry.domain.errors import MalformedPayloadError, MissingSystemInfoError
from device_registry.infrastructure.messaging import DeviceConfigChanged, MessageBus
from device_registry.infrastructure.persistence.repositories import SystemInfoRepository

logger = get_logger(__name__)


def parse_client_config(text: str) -> ClientConfig:
    """Parse the TOML configuration a device uploads.

    Expected shape::

        [uptane]
        polling_sec = 10
        force_install_completion = false

        [pacman]
        type = "ostree"

    Raises:
        MalformedPayloadError: If the document is not TOML or lacks a key.
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise MalformedPayloadError(f"Invalid TOML: {e}") from e

    uptane = document.get("uptane")
    pacman = document.get("pacman")
    if not isinstance(uptane, dict) or not isinstance(pacman, dict):
        raise MalformedPayloadError("Config requires [uptane] and [pacman] tables")

    polling_sec = uptane.get("polling_sec")
    force_install_completion = uptane.get("force_install_completion")
    pacman_type = pacman.get("type")

    # bool is a subclass of int in Python
    if not isinstance(polling_sec, int) or isinstance(polling_sec, bool):
        raise MalformedPayloadError("uptane.polling_sec must be an integer")
    if not isinstance(force_install_completion, bool):
        raise MalformedPayloadError("uptane.force_install_completion must be a boolean")
    if not isinstance(pacman_type, str):
        raise MalformedPayloadError("pacman.type must be a string")

    return ClientConfig(
        polling_sec=polling_sec,
        force_install_completion=force_install_completion,
        pacman_type=pacman_type,
    )


class SystemInfoService:
    """Reads and writes what devices report about themselves.

    Writes only flush; the caller commits and then publishes, so no
    message describes a change that was not stored.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.repository = SystemInfoRepository(session)

    async def fetch(self, device_uuid: str) -> Any:
        """Stored system info document, or an empty object if none was reported."""
        try:
            return await self.repository.find_by_uuid(device_uuid)
        except MissingSystemInfoError:
            return {}

    async def create(self, device_uuid: str, data: Any) -> Any:
        await self.repository.upsert(device_uuid, data)
        logger.info("System info created", device_uuid=device_uuid)
        return data

    async def update(self, device_uuid: str, data: Any) -> Any:
        await self.repository.upsert(device_uuid, data)
        logger.info("System info updated", device_uuid=device_uuid)
        return data

    async def get_network_info(self, device_uuid: str) -> NetworkInfo:
        """Reported network identity; empty strings if none was reported."""
        try:
            return await self.repository.get_network_info(device_uuid)
        except MissingSystemInfoError:
            return NetworkInfo.empty(device_uuid)

    async def set_network_info(self, info: NetworkInfo) -> None:
        await self.repository.set_network_info(info)
        logger.info("Network info updated", device_uuid=info.device_uuid)

    async def upload_client_config(
        self,
        namespace: str,
        device_uuid: str,
        text: str,
        message_bus: MessageBus,
    ) -> ClientConfig:
        """Parse an uploaded client config and publish it.

        The config is not stored; consumers of DeviceConfigChanged own it.

        Raises:
            MalformedPayloadError: If the document cannot be parsed.
            MessagePublishError: If the message could not be delivered.
        """
        config = parse_client_config(text)
        await message_bus.publish(
            DeviceConfigChanged(
                namespace=namespace,
                uuid=device_uuid,
                polling_sec=config.polling_sec,
                force_install_completion=config.force_install_completion,
                pacman_type=config.pacman_type,
            )
        )
        logger.info("Client config published", device_uuid=device_uuid, pacman_type=config.pacman_type)
        return config
