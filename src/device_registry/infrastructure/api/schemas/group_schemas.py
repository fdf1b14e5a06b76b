"""Pydantic schemas for group operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from device_registry.domain.entities.group import GroupType


class CreateGroupRequest(BaseModel):
    """Schema for creating a group."""

    name: str = Field(..., min_length=1, max_length=200, description="Group name, unique in the namespace")
    group_type: GroupType = Field(GroupType.STATIC, alias="groupType", description="static or dynamic")
    expression: str | None = Field(None, description="Membership expression (dynamic groups only)")

    model_config = ConfigDict(populate_by_name=True)


class GroupResponse(BaseModel):
    """Schema for group response."""

    id: str = Field(..., description="Group ID")
    namespace: str
    group_name: str = Field(..., alias="groupName")
    group_type: GroupType = Field(..., alias="groupType")
    expression: str | None = None
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class GroupPage(BaseModel):
    """One page of groups."""

    total: int
    offset: int
    limit: int
    values: list[GroupResponse] = Field(default_factory=list)


class GroupDeviceResponse(BaseModel):
    """A group member with its external device id."""

    uuid: str
    device_id: str = Field(..., alias="deviceId")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class DevicePage(BaseModel):
    """One page of group members; values are uuids or uuid/deviceId pairs."""

    total: int
    offset: int
    limit: int
    values: list[GroupDeviceResponse | str] = Field(default_factory=list)
