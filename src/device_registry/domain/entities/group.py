"""Group entity for organizing devices within a namespace.

A group is either static (members assigned explicitly) or dynamic
(members are whichever devices currently satisfy its expression).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class GroupType(str, Enum):
    """How a group's membership is determined."""

    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass
class Group:
    """Group entity scoped to a namespace.

    Attributes:
        id: Unique identifier (UUID string).
        namespace: Tenant namespace owning the group.
        name: Group name (unique within the namespace, exact match).
        group_type: Static or dynamic membership.
        expression: Membership expression; present iff the group is dynamic.
        created_at: Timestamp when the group was created.
        updated_at: Timestamp when the group was last renamed.
    """

    id: str
    namespace: str
    name: str
    group_type: GroupType
    expression: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate group data after initialization."""
        if not self.id:
            raise ValueError("Group ID is required")
        if not self.namespace:
            raise ValueError("Namespace is required")
        if not self.name:
            raise ValueError("Group name is required")
        self.group_type = GroupType(self.group_type)
        if self.is_dynamic and not self.expression:
            raise ValueError("Dynamic groups require an expression")
        if not self.is_dynamic and self.expression is not None:
            raise ValueError("Static groups cannot have an expression")

    @property
    def is_dynamic(self) -> bool:
        return self.group_type is GroupType.DYNAMIC
