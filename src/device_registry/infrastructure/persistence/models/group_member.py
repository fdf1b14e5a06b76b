"""SQLAlchemy model for the group_members junction table.

Holds explicit membership of static groups only.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from device_registry.infrastructure.persistence.database import Base, utcnow


class GroupMemberModel(Base):
    """Junction table between static groups and devices.

    Attributes:
        group_id: Foreign key to device_groups table.
        device_uuid: Foreign key to devices table.
        created_at: When the device was added.
    """

    __tablename__ = "group_members"

    group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("device_groups.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Foreign key to device_groups table",
    )
    device_uuid: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("devices.uuid", ondelete="CASCADE"),
        primary_key=True,
        index=True,
        comment="Foreign key to devices table",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<GroupMember(group_id={self.group_id}, device_uuid={self.device_uuid})>"
