"""Authorization scope of an authenticated caller."""

from dataclasses import dataclass, field
from enum import Enum


class Permission(str, Enum):
    READ = "read"
    WRITE = "write"


class ResourceKind(str, Enum):
    """Kinds of path identifiers whose owning namespace can be resolved."""

    GROUP = "group"
    DEVICE = "device"


DEVICES_READ = "devices.read"
DEVICES_WRITE = "devices.write"
ALL_DEVICE_SCOPES = frozenset({DEVICES_READ, DEVICES_WRITE})


def device_write_scope(device_uuid: str) -> str:
    """Scope letting a single device update its own records."""
    return f"devices.{device_uuid}.write"


@dataclass(frozen=True)
class AuthorizedScope:
    """Tenant namespace plus the scopes a caller was granted.

    Attributes:
        namespace: Namespace the caller is authenticated for.
        scopes: Granted scope strings (``devices.read``, ``devices.write``, ...).
        subject: Token subject, when known.
    """

    namespace: str
    scopes: frozenset[str] = field(default_factory=frozenset)
    subject: str | None = None

    def allows(self, permission: Permission) -> bool:
        """Write access implies read access."""
        if permission is Permission.READ:
            return DEVICES_READ in self.scopes or DEVICES_WRITE in self.scopes
        return DEVICES_WRITE in self.scopes

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes
