# ABOUTME: High-level service API orchestrating fetch, extraction and persistence of the catalogue
# ABOUTME: Runs processors, versions and devices in order; failed pages and tables are reported, not fatal

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from appledata.config import Config, get_config
from appledata.core.models import DeviceRecord, ProcessorRecord, TableFailure
from appledata.core.version import Version
from appledata.extraction import (
    extract_devices,
    extract_processors,
    extract_processors_from_headlines,
    extract_versions_from_release_page,
    extract_versions_from_summary,
)
from appledata.persistence import DatabaseManager
from appledata.utils.logging import get_logger, with_async_operation_context, with_page_context, with_sync_context
from appledata.utils.retry import FetchError
from appledata.wiki import WikiClient

ProcessorSource = Literal["wikipedia", "theiphonewiki"]


@dataclass(slots=True)
class SyncReport:
    """Counts and failures of one sync run."""

    processors: int = 0
    versions_found: int = 0
    versions_added: int = 0
    devices: int = 0
    codenames: int = 0
    failures: list[TableFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "processors": self.processors,
            "versions_found": self.versions_found,
            "versions_added": self.versions_added,
            "devices": self.devices,
            "codenames": self.codenames,
            "failures": [failure.model_dump() for failure in self.failures],
        }


class AppleDataService:
    """Service for syncing devices, processors and releases from the wikis into the database."""

    def __init__(
        self,
        client: WikiClient | None = None,
        database: DatabaseManager | None = None,
        config: Config | None = None,
        processor_source: ProcessorSource = "wikipedia",
    ):
        self.config = config or get_config()
        self.client = client or WikiClient(self.config)
        self.database = database
        self.processor_source = processor_source
        self.logger = get_logger(__name__)

    def _require_database(self) -> DatabaseManager:
        if self.database is None:
            self.database = DatabaseManager(self.config.database_url)
        return self.database

    def _page_failure(self, url: str, error: FetchError, failures: list[TableFailure]) -> None:
        failure = TableFailure.from_exception(url, error)
        failures.append(failure)
        self.logger.error("Page fetch failed", url=url, error_type=failure.error_type, error=failure.message)

    # --- Fetch and extract (no database) ---------------------------------------------

    async def fetch_processors(self, failures: list[TableFailure] | None = None) -> list[ProcessorRecord]:
        """Processors from the configured source."""
        failures = failures if failures is not None else []
        if self.processor_source == "theiphonewiki":
            url = self.config.theiphonewiki_processor_url
            extract = extract_processors_from_headlines
        else:
            url = self.config.processor_page_url
            extract = extract_processors

        try:
            document = await self.client.fetch_document(url)
        except FetchError as e:
            self._page_failure(url, e, failures)
            return []
        return extract(document)

    async def fetch_versions(
        self, include_summary: bool = False, failures: list[TableFailure] | None = None
    ) -> list[Version]:
        """Versions from every release page, in page order, optionally preceded by the summary page."""
        failures = failures if failures is not None else []
        pages: list[tuple[str, Callable[..., list[Version]]]] = []
        if include_summary:
            pages.append((self.config.version_history_url, extract_versions_from_summary))
        pages.extend((url, extract_versions_from_release_page) for url in self.config.release_pages)

        versions: list[Version] = []
        for url, extract in pages:
            with with_page_context(url) as log:
                try:
                    document = await self.client.fetch_document(url)
                except FetchError as e:
                    self._page_failure(url, e, failures)
                    continue
                found = extract(document)
                log.debug("Scanned release page", versions=len(found))
            versions.extend(found)
        return versions

    async def fetch_devices(self, failures: list[TableFailure] | None = None) -> list[DeviceRecord]:
        """DeviceRecords from the device list page; broken tables are added to failures."""
        failures = failures if failures is not None else []
        url = self.config.device_list_url
        try:
            document = await self.client.fetch_document(url)
        except FetchError as e:
            self._page_failure(url, e, failures)
            return []

        extraction = extract_devices(document, source=url, family_prefixes=self.config.device_family_prefixes)
        failures.extend(extraction.failures)
        return extraction.records

    # --- Sync stages -----------------------------------------------------------------

    async def sync_processors(self, report: SyncReport) -> None:
        database = self._require_database()
        for record in await self.fetch_processors(report.failures):
            await database.upsert_processor(record.code, record.label)
            report.processors += 1

    async def sync_versions(self, report: SyncReport) -> None:
        database = self._require_database()
        versions = await self.fetch_versions(include_summary=False, failures=report.failures)
        report.versions_found += len(versions)
        for version in versions:
            if await database.insert_version_if_absent(version):
                report.versions_added += 1

    async def sync_devices(self, report: SyncReport) -> None:
        database = self._require_database()
        for record in await self.fetch_devices(report.failures):
            if record.has_unset_fields:
                self.logger.warning("Device has unset fields", device=str(record))
            report.codenames += await database.store_device_record(record)
            report.devices += 1

    @with_async_operation_context("sync")
    async def run(self) -> SyncReport:
        """Full sync: processors, then versions, then devices (devices link to stored versions)."""
        database = self._require_database()
        report = SyncReport()

        with with_sync_context(processor_source=self.processor_source) as log:
            await database.create_tables()
            if self.config.seed_defaults:
                await database.seed_defaults()

            await self.sync_processors(report)
            log.info("Processors synced", processors=report.processors)

            await self.sync_versions(report)
            log.info("Versions synced", found=report.versions_found, added=report.versions_added)

            await self.sync_devices(report)
            log.info("Devices synced", devices=report.devices, codenames=report.codenames)

            if report.failures:
                log.warning("Sync finished with failures", failures=len(report.failures))

        return report

    async def close(self) -> None:
        await self.client.close()
        if self.database is not None:
            await self.database.close()
