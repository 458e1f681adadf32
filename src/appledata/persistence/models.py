# ABOUTME: Persistence models for processors, devices, firmware releases and their associations
# ABOUTME: One Device row per hardware codename; device_os links each device to every supported release

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from appledata.core.version import Version


def utcnow() -> datetime:
    """Returns the current UTC timestamp."""

    return datetime.now(UTC)


class Processor(SQLModel, table=True):
    """A system-on-chip, keyed by its short code."""

    __tablename__ = "apple_processors"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    code: str = Field(unique=True, index=True, description="Short code, e.g. A11_Bionic or S5L8900")
    label: str = Field(index=True, description="Label matched against device processor cells")
    updated_at: datetime = Field(default_factory=utcnow, description="Last modification timestamp")


class Device(SQLModel, table=True):
    """A hardware codename and the retail model it belongs to."""

    __tablename__ = "devices"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    model_name: str = Field(description="Marketing model name, e.g. iPhone X")
    codename: str = Field(unique=True, index=True, description="Hardware identifier, e.g. iPhone10,3")
    processor_id: int | None = Field(
        default=None, foreign_key="apple_processors.id", description="FK to apple_processors.id, unset when unknown"
    )
    updated_at: datetime = Field(default_factory=utcnow, description="Last modification timestamp")


class OperatingSystem(SQLModel, table=True):
    """A firmware release; (version_x, version_y, version_z) is unique."""

    __tablename__ = "operating_systems"  # type: ignore[assignment]
    __table_args__ = (UniqueConstraint("version_x", "version_y", "version_z", name="unique_version_idx"),)

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(default="ios", description="Operating system family")
    version_x: int = Field(description="Major version")
    version_y: int = Field(description="Minor version")
    version_z: int = Field(description="Patch version")

    @property
    def version(self) -> Version:
        return Version(self.version_x, self.version_y, self.version_z)

    @classmethod
    def from_version(cls, version: Version, name: str = "ios") -> OperatingSystem:
        return cls(name=name, version_x=version.major, version_y=version.minor, version_z=version.patch)


class DeviceOperatingSystemLink(SQLModel, table=True):
    """Association between a device and a release it supports."""

    __tablename__ = "device_os"  # type: ignore[assignment]

    device_id: int = Field(primary_key=True, foreign_key="devices.id")
    operating_system_id: int = Field(primary_key=True, foreign_key="operating_systems.id")
