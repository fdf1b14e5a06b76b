"""Router for device system info, network identity and client config."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, HTTPException, Request, Response, status

from device_registry.core.logging import get_logger
from device_registry.domain.entities.device import NetworkInfo
from device_registry.domain.services.system_info_service import SystemInfoService
from device_registry.infrastructure.api.dependencies import (
    Bus,
    DbSession,
    DeviceReader,
    DeviceSelf,
    DeviceWriter,
)
from device_registry.infrastructure.api.schemas.system_info_schemas import (
    NetworkInfoRequest,
    NetworkInfoResponse,
)
from device_registry.infrastructure.messaging import DeviceSystemInfoChanged, SystemInfoUpdatePublisher
from device_registry.infrastructure.persistence.database import commit_shielded

router = APIRouter(tags=["System info"])
logger = get_logger(__name__)

TOML_CONTENT_TYPE = "application/toml"


@router.get(
    "/devices/{device_id}/system_info",
    summary="Get the system info a device reported",
)
async def fetch_system_info(device_id: str, scope: DeviceReader, session: DbSession) -> Any:
    """Return the stored document, or an empty object if none was reported."""
    return await SystemInfoService(session).fetch(device_id)


@router.post(
    "/devices/{device_id}/system_info",
    status_code=status.HTTP_201_CREATED,
    summary="Store the system info of a device",
)
async def create_system_info(
    device_id: str,
    data: Annotated[Any, Body()],
    scope: DeviceWriter,
    session: DbSession,
    message_bus: Bus,
) -> Any:
    await SystemInfoService(session).create(device_id, data)
    await commit_shielded(session)
    await SystemInfoUpdatePublisher(message_bus).publish_safe(scope.namespace, device_id, data)
    return data


@router.put(
    "/devices/{device_id}/system_info",
    summary="Replace the system info of a device",
)
async def update_system_info(
    device_id: str,
    data: Annotated[Any, Body()],
    scope: DeviceWriter,
    session: DbSession,
    message_bus: Bus,
) -> Any:
    await SystemInfoService(session).update(device_id, data)
    await commit_shielded(session)
    await SystemInfoUpdatePublisher(message_bus).publish_safe(scope.namespace, device_id, data)
    return data


@router.get(
    "/devices/{device_id}/system_info/network",
    response_model=NetworkInfoResponse,
    summary="Get the network identity of a device",
)
async def get_network_info(device_id: str, scope: DeviceReader, session: DbSession) -> NetworkInfoResponse:
    info = await SystemInfoService(session).get_network_info(device_id)
    return NetworkInfoResponse(**info.as_attributes())


@router.put(
    "/devices/{device_id}/system_info/network",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set the network identity of a device",
)
async def set_network_info(
    device_id: str,
    payload: NetworkInfoRequest,
    scope: DeviceWriter,
    session: DbSession,
    message_bus: Bus,
) -> Response:
    """Store the network identity, then publish the change.

    A publish failure fails the request with 503 even though the network
    identity is already stored; retrying is safe.
    """
    await SystemInfoService(session).set_network_info(
        NetworkInfo(
            device_uuid=device_id,
            local_ipv4=payload.local_ipv4,
            hostname=payload.hostname,
            mac_address=payload.mac,
        )
    )
    await commit_shielded(session)
    await message_bus.publish(DeviceSystemInfoChanged(namespace=scope.namespace, uuid=device_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/devices/{device_id}/system_info/config",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Upload the client config of a device",
)
async def upload_client_config(
    device_id: str,
    request: Request,
    scope: DeviceWriter,
    session: DbSession,
    message_bus: Bus,
) -> Response:
    """Accept an ``application/toml`` client config and publish it."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type != TOML_CONTENT_TYPE:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Expected {TOML_CONTENT_TYPE}",
        )

    body = (await request.body()).decode("utf-8", errors="replace")
    await SystemInfoService(session).upload_client_config(scope.namespace, device_id, body, message_bus)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/mydevice/{device_id}/system_info",
    summary="Replace the system info of the calling device",
)
async def update_own_system_info(
    device_id: str,
    data: Annotated[Any, Body()],
    namespace: DeviceSelf,
    session: DbSession,
    message_bus: Bus,
) -> Any:
    await SystemInfoService(session).update(device_id, data)
    await commit_shielded(session)
    await SystemInfoUpdatePublisher(message_bus).publish_safe(namespace, device_id, data)
    return data
