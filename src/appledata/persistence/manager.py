# ABOUTME: Database manager for processors, devices and firmware releases
# ABOUTME: Idempotent upserts keyed by code/codename/version and range-based device-release linking

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from appledata.core.models import DeviceRecord
from appledata.core.version import Version, VersionRange
from appledata.persistence.models import Device, DeviceOperatingSystemLink, OperatingSystem, Processor, utcnow
from appledata.utils.logging import get_logger

VENDOR_PREFIX = "Apple "

# Processors that predate the System-on-chip table
EARLY_PROCESSORS = [
    ("S5L8900", "Samsung S5L8900"),
    ("S5L8920", "Samsung S5PC100"),
]

# The iOS 10 page has no per-release table
MISSING_RELEASES = [
    Version(10, 0, 1),
    Version(10, 0, 2),
    Version(10, 1, 0),
    Version(10, 1, 1),
    Version(10, 2, 0),
    Version(10, 2, 1),
    Version(10, 3, 0),
    Version(10, 3, 1),
    Version(10, 3, 2),
    Version(10, 3, 3),
    Version(10, 3, 4),
]

DROP_OS_MODEL_VIEW = "DROP VIEW IF EXISTS v_os_model"
CREATE_OS_MODEL_VIEW = """
CREATE VIEW v_os_model AS
SELECT os.version_x, os.version_y, os.version_z, md.model_name, md.codename, ap.label AS cpu
FROM device_os dos
JOIN devices md ON md.id = dos.device_id
LEFT JOIN apple_processors ap ON ap.id = md.processor_id
JOIN operating_systems os ON os.id = dos.operating_system_id
"""


def processor_label_candidates(cpu_label: str) -> list[str]:
    """Labels a device processor cell may be stored under, vendor prefix first dropped."""
    label = cpu_label.strip()
    if label.startswith(VENDOR_PREFIX):
        return [label[len(VENDOR_PREFIX) :], label]
    return [label]


class DatabaseManager:
    """Manages async database operations for the device catalogue."""

    def __init__(self, database_url: str = "sqlite+aiosqlite:///./appledata.sqlite"):
        self.database_url = database_url
        self.logger = get_logger(__name__)
        self.engine = create_async_engine(database_url, echo=False)
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create all tables and (re)create the v_os_model reporting view."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
            await conn.execute(text(DROP_OS_MODEL_VIEW))
            await conn.execute(text(CREATE_OS_MODEL_VIEW))

    async def seed_defaults(self) -> None:
        """Insert early processors and the releases the wiki pages do not list. Idempotent."""
        async with self.async_session() as session:
            for code, label in EARLY_PROCESSORS:
                existing = await session.exec(select(Processor).where(Processor.code == code))
                if existing.scalars().first() is None:
                    session.add(Processor(code=code, label=label))
            await session.commit()

        added = 0
        for version in MISSING_RELEASES:
            if await self.insert_version_if_absent(version):
                added += 1
        self.logger.debug("Seeded defaults", processors=len(EARLY_PROCESSORS), versions_added=added)

    async def upsert_processor(self, code: str, label: str) -> Processor:
        """Create the processor or update its label."""
        async with self.async_session() as session:
            result = await session.exec(select(Processor).where(Processor.code == code))
            processor = result.scalars().first()
            if processor:
                if processor.label != label:
                    processor.label = label
                    processor.updated_at = utcnow()
                    session.add(processor)
            else:
                processor = Processor(code=code, label=label)
                session.add(processor)
            await session.commit()
            await session.refresh(processor)

        self.logger.info("Adding/updating processor", code=code, label=label)
        return processor

    async def insert_version_if_absent(self, version: Version, name: str = "ios") -> bool:
        """Store a release unless the same version triple is already present.

        Returns:
            True when a row was inserted
        """
        async with self.async_session() as session:
            if await self._find_version(session, version) is not None:
                return False
            session.add(OperatingSystem.from_version(version, name=name))
            await session.commit()
        return True

    async def upsert_device(
        self,
        model_name: str,
        codename: str,
        cpu_label: str,
        min_version: Version,
        max_version: Version,
    ) -> Device:
        """Create or update a device and link it to every stored release in [min_version, max_version].

        The processor is resolved by label after dropping a leading "Apple ";
        an unknown processor leaves the device without one.
        """
        log = self.logger.bind(model_name=model_name, codename=codename)

        async with self.async_session() as session:
            result = await session.exec(select(Device).where(Device.codename == codename))
            device = result.scalars().first()
            if device is None:
                device = Device(model_name=model_name, codename=codename)
            else:
                device.model_name = model_name
                device.updated_at = utcnow()

            processor = await self._find_processor(session, cpu_label) if cpu_label else None
            if processor is not None:
                log.debug("Setting processor", cpu=processor.label)
                device.processor_id = processor.id
            else:
                log.warning("Unknown processor", cpu=cpu_label)

            session.add(device)
            await session.commit()
            await session.refresh(device)

            supported = VersionRange.inclusive(min_version, max_version)
            releases = (await session.exec(select(OperatingSystem))).scalars().all()
            linked = await self._linked_release_ids(session, device.id)

            added = 0
            for release in releases:
                if release.id in linked or release.version not in supported:
                    continue
                session.add(DeviceOperatingSystemLink(device_id=device.id, operating_system_id=release.id))
                added += 1
            await session.commit()

        log.debug("Stored device", supported=str(supported), links_added=added)
        return device

    async def store_device_record(self, record: DeviceRecord) -> int:
        """Store one row per codename of an extracted record; returns the number of rows written."""
        for codename in record.codenames:
            await self.upsert_device(
                record.model_name, codename, record.processor, record.min_version, record.max_version
            )
        return len(record.codenames)

    async def list_processors(self) -> list[Processor]:
        async with self.async_session() as session:
            result = await session.exec(select(Processor).order_by(Processor.code))
            return list(result.scalars().all())

    async def list_versions(self) -> list[Version]:
        """All stored releases in ascending order."""
        async with self.async_session() as session:
            result = await session.exec(select(OperatingSystem))
            return sorted(release.version for release in result.scalars().all())

    async def get_device(self, codename: str) -> Device | None:
        async with self.async_session() as session:
            result = await session.exec(select(Device).where(Device.codename == codename))
            return result.scalars().first()

    async def get_processor(self, processor_id: int) -> Processor | None:
        async with self.async_session() as session:
            return await session.get(Processor, processor_id)

    async def versions_for_device(self, codename: str) -> list[Version]:
        """Releases linked to a device codename, ascending."""
        async with self.async_session() as session:
            result = await session.exec(
                select(OperatingSystem)
                .join(DeviceOperatingSystemLink, DeviceOperatingSystemLink.operating_system_id == OperatingSystem.id)
                .join(Device, Device.id == DeviceOperatingSystemLink.device_id)
                .where(Device.codename == codename)
            )
            return sorted(release.version for release in result.scalars().all())

    async def devices_for_version(self, version: Version) -> list[Device]:
        """Devices linked to a release, ordered by codename."""
        async with self.async_session() as session:
            result = await session.exec(
                select(Device)
                .join(DeviceOperatingSystemLink, DeviceOperatingSystemLink.device_id == Device.id)
                .join(OperatingSystem, OperatingSystem.id == DeviceOperatingSystemLink.operating_system_id)
                .where(
                    OperatingSystem.version_x == version.major,
                    OperatingSystem.version_y == version.minor,
                    OperatingSystem.version_z == version.patch,
                )
                .order_by(Device.codename)
            )
            return list(result.scalars().all())

    async def os_model_rows(self) -> list[dict[str, Any]]:
        """Rows of the v_os_model reporting view."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT * FROM v_os_model"))
            return [dict(row) for row in result.mappings().all()]

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield an async session for advanced scenarios."""
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _find_version(self, session: AsyncSession, version: Version) -> OperatingSystem | None:
        result = await session.exec(
            select(OperatingSystem).where(
                OperatingSystem.version_x == version.major,
                OperatingSystem.version_y == version.minor,
                OperatingSystem.version_z == version.patch,
            )
        )
        return result.scalars().first()

    async def _find_processor(self, session: AsyncSession, cpu_label: str) -> Processor | None:
        for label in processor_label_candidates(cpu_label):
            result = await session.exec(select(Processor).where(Processor.label == label))
            processor = result.scalars().first()
            if processor is not None:
                return processor
        return None

    async def _linked_release_ids(self, session: AsyncSession, device_id: int | None) -> set[int]:
        result = await session.exec(
            select(DeviceOperatingSystemLink.operating_system_id).where(
                DeviceOperatingSystemLink.device_id == device_id
            )
        )
        return set(result.scalars().all())

