"""Integration tests for the groups API."""

import pytest
from fastapi import status

from device_registry.core.config import Settings
from device_registry.domain.entities.scope import DEVICES_READ

GROUPS = "/api/v1/groups"


async def create_group(client, headers, name="Fleet", group_type="static", expression=None):
    body = {"name": name, "groupType": group_type}
    if expression is not None:
        body["expression"] = expression
    response = await client.post(GROUPS, json=body, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_group(client, auth_headers):
    headers = auth_headers()
    group_id = await create_group(client, headers)

    response = await client.get(f"{GROUPS}/{group_id}", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == group_id
    assert data["namespace"] == "acme"
    assert data["groupName"] == "Fleet"
    assert data["groupType"] == "static"
    assert data["expression"] is None
    assert "createdAt" in data


@pytest.mark.asyncio
async def test_duplicate_name_is_rejected(client, auth_headers):
    headers = auth_headers()
    await create_group(client, headers)

    response = await client.post(GROUPS, json={"name": "Fleet"}, headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "conflicting_entity"


@pytest.mark.asyncio
async def test_same_name_in_other_namespace_is_allowed(client, auth_headers):
    await create_group(client, auth_headers("acme"))
    await create_group(client, auth_headers("globex"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"name": "Bad", "groupType": "dynamic", "expression": "role =="},
        {"name": "Bad", "groupType": "dynamic"},
        {"name": "Bad", "groupType": "static", "expression": "role == 'x'"},
        {"name": "Bad", "groupType": "dynamic", "expression": "role == ²"},
        {"name": "Bad", "groupType": "dynamic", "expression": "(" * 300 + "role" + ")" * 300},
    ],
)
async def test_invalid_expression_is_rejected(client, auth_headers, body):
    response = await client.post(GROUPS, json=body, headers=auth_headers())

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invalid_group_expression"


@pytest.mark.asyncio
async def test_list_groups_is_namespace_scoped(client, auth_headers):
    headers = auth_headers()
    await create_group(client, headers, name="Beta")
    await create_group(client, headers, name="Alpha")
    await create_group(client, auth_headers("globex"), name="Other")

    response = await client.get(GROUPS, params={"limit": 10}, headers=headers)

    assert response.status_code == status.HTTP_200_OK
    page = response.json()
    assert page["total"] == 2
    assert page["offset"] == 0
    assert page["limit"] == 10
    assert [group["groupName"] for group in page["values"]] == ["Alpha", "Beta"]


@pytest.mark.asyncio
async def test_group_of_other_namespace_is_forbidden(client, auth_headers):
    group_id = await create_group(client, auth_headers("globex"))

    response = await client.get(f"{GROUPS}/{group_id}", headers=auth_headers("acme"))

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_missing_group(client, auth_headers):
    response = await client.get(f"{GROUPS}/does-not-exist", headers=auth_headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "missing_entity"


@pytest.mark.asyncio
async def test_rename_group(client, auth_headers):
    headers = auth_headers()
    group_id = await create_group(client, headers)
    await create_group(client, headers, name="Taken")

    response = await client.put(f"{GROUPS}/{group_id}/rename", params={"groupName": "Renamed"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["groupName"] == "Renamed"

    response = await client.put(f"{GROUPS}/{group_id}/rename", params={"groupName": "Taken"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "conflicting_entity"


@pytest.mark.asyncio
async def test_static_membership_flow(client, auth_headers, make_device):
    headers = auth_headers()
    group_id = await create_group(client, headers)
    d2 = await make_device("D2")
    d1 = await make_device("D1")

    for device in (d1, d2, d1):
        response = await client.post(f"{GROUPS}/{group_id}/devices/{device.uuid}", headers=headers)
        assert response.status_code == status.HTTP_200_OK

    response = await client.get(f"{GROUPS}/{group_id}/count", headers=headers)
    assert response.json() == 2

    response = await client.get(f"{GROUPS}/{group_id}/devices", headers=headers)
    assert response.json()["values"] == [d1.uuid, d2.uuid]

    response = await client.delete(f"{GROUPS}/{group_id}/devices/{d1.uuid}", headers=headers)
    assert response.status_code == status.HTTP_200_OK

    response = await client.get(f"{GROUPS}/{group_id}/devices", headers=headers)
    assert response.json()["total"] == 1
    assert response.json()["values"] == [d2.uuid]


@pytest.mark.asyncio
@pytest.mark.parametrize("accept", ["application/json;vin=1", "application/*; vin=1"])
async def test_devices_with_device_ids(client, auth_headers, make_device, accept):
    headers = auth_headers()
    group_id = await create_group(client, headers, name="Sensors", group_type="dynamic", expression="role == 'sensor'")
    sensor = await make_device("VIN-1", attributes={"role": "sensor"})
    await make_device("VIN-2", attributes={"role": "actuator"})

    response = await client.get(
        f"{GROUPS}/{group_id}/devices",
        headers={**headers, "Accept": accept},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["values"] == [{"uuid": sensor.uuid, "deviceId": "VIN-1"}]


@pytest.mark.asyncio
async def test_dynamic_group_membership_cannot_be_assigned(client, auth_headers, make_device):
    headers = auth_headers()
    group_id = await create_group(client, headers, name="Sensors", group_type="dynamic", expression="role == 'sensor'")
    device = await make_device("D1")

    response = await client.post(f"{GROUPS}/{group_id}/devices/{device.uuid}", headers=headers)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "group_type_mismatch"


@pytest.mark.asyncio
async def test_device_of_other_namespace_cannot_join(client, auth_headers, make_device):
    headers = auth_headers()
    group_id = await create_group(client, headers)
    foreign = await make_device("D1", namespace="globex")

    response = await client.post(f"{GROUPS}/{group_id}/devices/{foreign.uuid}", headers=headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_negative_offset_is_malformed(client, auth_headers):
    headers = auth_headers()
    group_id = await create_group(client, headers)

    response = await client.get(f"{GROUPS}/{group_id}/devices", params={"offset": -1}, headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "malformed_input"


@pytest.mark.asyncio
async def test_missing_token_is_unauthorized(client):
    response = await client.get(GROUPS)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_token_is_unauthorized(client):
    response = await client.get(GROUPS, headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_read_only_scope_cannot_create(client, auth_headers):
    response = await client.post(GROUPS, json={"name": "Fleet"}, headers=auth_headers(scopes=(DEVICES_READ,)))

    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.get(GROUPS, headers=auth_headers(scopes=(DEVICES_READ,)))
    assert response.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_namespace_header_without_auth(client, monkeypatch):
    settings = Settings(_env_file=None, auth_protocol="none")
    monkeypatch.setattr(
        "device_registry.infrastructure.api.dependencies.get_settings",
        lambda: settings,
    )

    response = await client.post(GROUPS, json={"name": "Fleet"}, headers={"x-ats-namespace": "globex"})
    assert response.status_code == status.HTTP_201_CREATED
    group_id = response.json()

    response = await client.get(f"{GROUPS}/{group_id}", headers={"x-ats-namespace": "globex"})
    assert response.json()["namespace"] == "globex"

    response = await client.get(f"{GROUPS}/{group_id}")
    assert response.status_code == status.HTTP_403_FORBIDDEN
