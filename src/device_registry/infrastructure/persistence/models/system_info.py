"""SQLAlchemy model for the device_system_info table."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from device_registry.infrastructure.persistence.database import Base, utcnow


class SystemInfoModel(Base):
    """System information a device reported about itself.

    Attributes:
        device_uuid: Primary key and foreign key to devices table.
        system_info: Reported document, None until one is uploaded.
        local_ipv4: Reported local IPv4 address.
        mac_address: Reported MAC address.
        hostname: Reported hostname.
        updated_at: Timestamp of the last report.
    """

    __tablename__ = "device_system_info"

    device_uuid: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("devices.uuid", ondelete="CASCADE"),
        primary_key=True,
        comment="Foreign key to devices table",
    )
    system_info: Mapped[Any | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    local_ipv4: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mac_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    hostname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    device: Mapped["DeviceModel"] = relationship(  # noqa: F821
        "DeviceModel",
        back_populates="system_info",
    )

    @property
    def has_network_info(self) -> bool:
        return self.local_ipv4 is not None or self.mac_address is not None or self.hostname is not None

    def __repr__(self) -> str:
        return f"<SystemInfo(device_uuid={self.device_uuid})>"
