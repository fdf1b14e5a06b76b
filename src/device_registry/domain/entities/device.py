"""Device-side value objects referenced by group membership."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GroupDevice:
    """A member of a group: internal uuid plus the device's external id."""

    uuid: str
    device_id: str


@dataclass(frozen=True)
class NetworkInfo:
    """Network identity a device reports about itself."""

    device_uuid: str
    local_ipv4: str
    hostname: str
    mac_address: str

    @classmethod
    def empty(cls, device_uuid: str) -> "NetworkInfo":
        return cls(device_uuid=device_uuid, local_ipv4="", hostname="", mac_address="")

    def as_attributes(self) -> dict[str, str]:
        """Shape used inside the device attribute view and on the wire."""
        return {"local_ipv4": self.local_ipv4, "mac": self.mac_address, "hostname": self.hostname}


@dataclass(frozen=True)
class ClientConfig:
    """Settings a device's update client reports it is running with."""

    polling_sec: int
    force_install_completion: bool
    pacman_type: str
