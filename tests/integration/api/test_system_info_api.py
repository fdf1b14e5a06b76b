"""Integration tests for the system info API."""

import pytest
from fastapi import status

from device_registry.domain.entities.scope import DEVICES_READ, device_write_scope
from device_registry.domain.errors import MessagePublishError

CLIENT_CONFIG = """
[uptane]
polling_sec = 10
force_install_completion = true

[pacman]
type = "ostree"
"""


def system_info_url(device_uuid: str, suffix: str = "") -> str:
    return f"/api/v1/devices/{device_uuid}/system_info{suffix}"


@pytest.mark.asyncio
async def test_fetch_without_report_is_empty(client, auth_headers, make_device):
    device = await make_device("D1")

    response = await client.get(system_info_url(device.uuid), headers=auth_headers())

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {}


@pytest.mark.asyncio
async def test_create_and_update_publish(client, auth_headers, make_device, message_bus):
    headers = auth_headers()
    device = await make_device("D1")

    response = await client.post(system_info_url(device.uuid), json={"os": "linux"}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED

    response = await client.put(system_info_url(device.uuid), json={"os": "qnx"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK

    response = await client.get(system_info_url(device.uuid), headers=headers)
    assert response.json() == {"os": "qnx"}

    published = message_bus.of_type("device.system_info.changed")
    assert [message.new_system_info for message in published] == [{"os": "linux"}, {"os": "qnx"}]
    assert all(message.namespace == "acme" for message in published)


@pytest.mark.asyncio
async def test_update_succeeds_when_bus_is_down(client, auth_headers, make_device, message_bus):
    headers = auth_headers()
    device = await make_device("D1")
    message_bus.fail_with = MessagePublishError("bus down")

    response = await client.put(system_info_url(device.uuid), json={"os": "linux"}, headers=headers)

    assert response.status_code == status.HTTP_200_OK
    response = await client.get(system_info_url(device.uuid), headers=headers)
    assert response.json() == {"os": "linux"}


@pytest.mark.asyncio
async def test_system_info_of_other_namespace_is_forbidden(client, auth_headers, make_device):
    device = await make_device("D1", namespace="globex")

    response = await client.get(system_info_url(device.uuid), headers=auth_headers())

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_unknown_device(client, auth_headers):
    response = await client.get(system_info_url("missing"), headers=auth_headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_network_info_round_trip(client, auth_headers, make_device, message_bus):
    headers = auth_headers()
    device = await make_device("D1")

    response = await client.get(system_info_url(device.uuid, "/network"), headers=headers)
    assert response.json() == {"local_ipv4": "", "mac": "", "hostname": ""}

    network = {"local_ipv4": "10.0.0.7", "mac": "aa:bb:cc:dd:ee:ff", "hostname": "car-7"}
    response = await client.put(system_info_url(device.uuid, "/network"), json=network, headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = await client.get(system_info_url(device.uuid, "/network"), headers=headers)
    assert response.json() == network

    [message] = message_bus.of_type("device.system_info.changed")
    assert message.uuid == device.uuid


@pytest.mark.asyncio
async def test_network_publish_failure_is_reported(client, auth_headers, make_device, message_bus):
    headers = auth_headers()
    device = await make_device("D1")
    message_bus.fail_with = MessagePublishError("bus down")
    network = {"local_ipv4": "10.0.0.7", "mac": "aa:bb:cc:dd:ee:ff", "hostname": "car-7"}

    response = await client.put(system_info_url(device.uuid, "/network"), json=network, headers=headers)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["code"] == "message_publish_failed"

    response = await client.get(system_info_url(device.uuid, "/network"), headers=headers)
    assert response.json() == network


@pytest.mark.asyncio
async def test_upload_client_config(client, auth_headers, make_device, message_bus):
    device = await make_device("D1")

    response = await client.post(
        system_info_url(device.uuid, "/config"),
        content=CLIENT_CONFIG,
        headers={**auth_headers(), "Content-Type": "application/toml"},
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    [message] = message_bus.of_type("device.config.changed")
    assert message.uuid == device.uuid
    assert message.polling_sec == 10
    assert message.force_install_completion is True
    assert message.pacman_type == "ostree"


@pytest.mark.asyncio
async def test_malformed_client_config(client, auth_headers, make_device, message_bus):
    device = await make_device("D1")

    response = await client.post(
        system_info_url(device.uuid, "/config"),
        content="[uptane]\npolling_sec = 'often'\n",
        headers={**auth_headers(), "Content-Type": "application/toml"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "malformed_input"
    assert message_bus.messages == []


@pytest.mark.asyncio
async def test_client_config_requires_toml(client, auth_headers, make_device):
    device = await make_device("D1")

    response = await client.post(
        system_info_url(device.uuid, "/config"),
        json={"uptane": {}},
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


@pytest.mark.asyncio
async def test_device_updates_own_system_info(client, make_token, make_device, message_bus):
    device = await make_device("D1")
    token = make_token("devices", scopes=(device_write_scope(device.uuid),))

    response = await client.put(
        f"/api/v1/mydevice/{device.uuid}/system_info",
        json={"os": "linux"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == status.HTTP_200_OK
    [message] = message_bus.of_type("device.system_info.changed")
    assert message.namespace == "acme"


@pytest.mark.asyncio
async def test_device_scope_does_not_cover_other_devices(client, make_token, make_device):
    device = await make_device("D1")
    other = await make_device("D2")
    token = make_token("devices", scopes=(device_write_scope(device.uuid),))

    response = await client.put(
        f"/api/v1/mydevice/{other.uuid}/system_info",
        json={"os": "linux"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_read_scope_cannot_update_own_system_info(client, auth_headers, make_device):
    device = await make_device("D1")

    response = await client.put(
        f"/api/v1/mydevice/{device.uuid}/system_info",
        json={"os": "linux"},
        headers=auth_headers(scopes=(DEVICES_READ,)),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
