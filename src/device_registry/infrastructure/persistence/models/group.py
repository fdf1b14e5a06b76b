"""SQLAlchemy model for the device_groups table."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from device_registry.domain.entities.group import Group, GroupType
from device_registry.infrastructure.persistence.database import Base, utcnow


class GroupModel(Base):
    """SQLAlchemy model for the device_groups table.

    Attributes:
        id: Primary key (UUID string).
        namespace: Owning namespace.
        name: Group name (unique within namespace).
        group_type: 'static' or 'dynamic'.
        expression: Membership expression, only for dynamic groups.
        created_at: Timestamp when the group was created.
        updated_at: Timestamp when the group was last updated.
    """

    __tablename__ = "device_groups"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Group ID (UUID)",
    )
    namespace: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Owning namespace",
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Group name",
    )
    group_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="static or dynamic",
    )
    expression: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Membership expression of a dynamic group",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("namespace", "name", name="uq_device_groups_namespace_name"),
        Index("ix_device_groups_namespace_name", "namespace", "name"),
    )

    def to_entity(self) -> Group:
        return Group(
            id=self.id,
            namespace=self.namespace,
            name=self.name,
            group_type=GroupType(self.group_type),
            expression=self.expression,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.name}, namespace={self.namespace})>"
