"""Router for groups and group membership."""

from typing import Annotated

from fastapi import APIRouter, Header, Query, status

from device_registry.core.logging import get_logger
from device_registry.domain.entities.device import GroupDevice
from device_registry.domain.entities.group import Group
from device_registry.domain.services.group_membership import GroupMembership
from device_registry.domain.services.group_registry import GroupRegistry
from device_registry.infrastructure.api.dependencies import (
    DbSession,
    DeviceOwner,
    GroupReader,
    GroupWriter,
    ReadScope,
    WriteScope,
)
from device_registry.infrastructure.api.schemas.group_schemas import (
    CreateGroupRequest,
    DevicePage,
    GroupDeviceResponse,
    GroupPage,
    GroupResponse,
)
from device_registry.infrastructure.persistence.database import commit_shielded

router = APIRouter(tags=["Groups"])
logger = get_logger(__name__)

# Media type parameter asking for uuid/deviceId pairs instead of bare uuids
DEVICE_ID_MEDIA_PARAM = ("vin", "1")


def wants_device_ids(accept: str | None) -> bool:
    """Check whether the Accept header asks for ``application/json;vin=1``."""
    if not accept:
        return False

    for media_range in accept.split(","):
        media_type, *params = [part.strip() for part in media_range.split(";")]
        if media_type.lower() not in ("application/json", "application/*", "*/*"):
            continue
        for param in params:
            key, _, value = param.partition("=")
            if (key.strip().lower(), value.strip()) == DEVICE_ID_MEDIA_PARAM:
                return True
    return False


def to_response(group: Group) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        namespace=group.namespace,
        group_name=group.name,
        group_type=group.group_type,
        expression=group.expression,
        created_at=group.created_at,
        updated_at=group.updated_at,
    )


@router.post(
    "",
    response_model=str,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new group",
)
async def create_group(
    group_data: CreateGroupRequest,
    scope: WriteScope,
    session: DbSession,
) -> str:
    """Create a static or dynamic group in the caller's namespace.

    Returns the new group id.
    """
    group_id = await GroupMembership(session).create(
        name=group_data.name,
        namespace=scope.namespace,
        group_type=group_data.group_type,
        expression=group_data.expression,
    )
    await commit_shielded(session)
    return group_id


@router.get(
    "",
    response_model=GroupPage,
    summary="List groups",
)
async def list_groups(
    scope: ReadScope,
    session: DbSession,
    offset: int | None = None,
    limit: int | None = None,
) -> GroupPage:
    """List the groups of the caller's namespace ordered by name."""
    page = await GroupRegistry(session).list(scope.namespace, offset, limit)
    return GroupPage(
        total=page.total,
        offset=page.offset,
        limit=page.limit,
        values=[to_response(group) for group in page.values],
    )


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Get a group",
)
async def get_group(group_id: str, scope: GroupReader, session: DbSession) -> GroupResponse:
    return to_response(await GroupRegistry(session).get(group_id))


@router.put(
    "/{group_id}/rename",
    response_model=GroupResponse,
    summary="Rename a group",
)
async def rename_group(
    group_id: str,
    group_name: Annotated[str, Query(alias="groupName", min_length=1, max_length=200)],
    scope: GroupWriter,
    session: DbSession,
) -> GroupResponse:
    group = await GroupRegistry(session).rename(group_id, group_name)
    await commit_shielded(session)
    return to_response(group)


@router.get(
    "/{group_id}/count",
    response_model=int,
    summary="Count the devices of a group",
)
async def count_devices(group_id: str, scope: GroupReader, session: DbSession) -> int:
    return await GroupMembership(session).count_devices(group_id)


@router.get(
    "/{group_id}/devices",
    response_model=DevicePage,
    summary="List the devices of a group",
)
async def list_devices(
    group_id: str,
    scope: GroupReader,
    session: DbSession,
    offset: int | None = None,
    limit: int | None = None,
    accept: Annotated[str | None, Header()] = None,
) -> DevicePage:
    """List group members ordered by device id.

    Values are device uuids, or ``{uuid, deviceId}`` objects when the
    client accepts ``application/json;vin=1``.
    """
    include_device_id = wants_device_ids(accept)
    page = await GroupMembership(session).list_devices(
        group_id,
        offset=offset,
        limit=limit,
        include_device_id=include_device_id,
    )
    values = [
        GroupDeviceResponse(uuid=value.uuid, device_id=value.device_id)
        if isinstance(value, GroupDevice)
        else value
        for value in page.values
    ]
    return DevicePage(total=page.total, offset=page.offset, limit=page.limit, values=values)


@router.post(
    "/{group_id}/devices/{device_id}",
    status_code=status.HTTP_200_OK,
    summary="Add a device to a static group",
)
async def add_group_member(
    group_id: str,
    device_id: str,
    scope: GroupWriter,
    device_scope: DeviceOwner,
    session: DbSession,
) -> None:
    await GroupMembership(session).add_group_member(group_id, device_id)
    await commit_shielded(session)


@router.delete(
    "/{group_id}/devices/{device_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove a device from a static group",
)
async def remove_group_member(
    group_id: str,
    device_id: str,
    scope: GroupWriter,
    device_scope: DeviceOwner,
    session: DbSession,
) -> None:
    await GroupMembership(session).remove_group_member(group_id, device_id)
    await commit_shielded(session)
