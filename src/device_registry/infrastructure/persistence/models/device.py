"""SQLAlchemy model for the devices table.

Devices are owned by the device directory; groups only reference them.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from device_registry.infrastructure.persistence.database import Base, utcnow


class DeviceModel(Base):
    """SQLAlchemy model for the devices table.

    Attributes:
        uuid: Primary key (UUID string).
        namespace: Tenant namespace owning the device.
        device_id: External device identifier (unique within namespace).
        device_name: Human readable name.
        device_type: Free-form device class (e.g. vehicle, gateway).
        attributes: Arbitrary attributes used by dynamic group expressions.
        created_at: Timestamp when the device was registered.
    """

    __tablename__ = "devices"

    uuid: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Device UUID",
    )
    namespace: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Owning namespace",
    )
    device_id: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="External device identifier",
    )
    device_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    device_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    attributes: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Attributes matched by dynamic group expressions",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )

    system_info: Mapped["SystemInfoModel | None"] = relationship(  # noqa: F821
        "SystemInfoModel",
        back_populates="device",
        uselist=False,
        lazy="raise",
    )

    __table_args__ = (
        UniqueConstraint("namespace", "device_id", name="uq_devices_namespace_device_id"),
        Index("ix_devices_namespace_device_id", "namespace", "device_id"),
    )

    def __repr__(self) -> str:
        return f"<Device(uuid={self.uuid}, device_id={self.device_id}, namespace={self.namespace})>"
