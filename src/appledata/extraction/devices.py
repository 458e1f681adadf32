# ABOUTME: Device-table extraction over a whole document: classify, extract rows, assemble records
# ABOUTME: A broken table is recorded as a TableFailure and the remaining tables are still processed

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from appledata.core.errors import ExtractionError
from appledata.core.models import DeviceRecord, TableFailure
from appledata.extraction.assembler import assemble_devices
from appledata.extraction.classifier import DeviceTableLayout, classify_device_table
from appledata.extraction.html import iter_wikitables
from appledata.extraction.patterns import DEFAULT_FAMILY_PREFIXES, hardware_identifier_pattern
from appledata.extraction.rows import codename_values, processor_values, release_values
from appledata.utils.logging import get_logger, with_operation_context

logger = get_logger(__name__)


@dataclass(slots=True)
class DeviceExtraction:
    """Records from every device table that extracted cleanly, plus the tables that did not."""

    source: str
    records: list[DeviceRecord] = field(default_factory=list)
    failures: list[TableFailure] = field(default_factory=list)
    tables_matched: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise the first recorded failure, for callers that want all-or-nothing."""
        if self.failures:
            first = self.failures[0]
            raise ExtractionError(
                f"{len(self.failures)} device table(s) failed, first: {first.message}",
                table_index=first.table_index,
                row_label=first.row_label,
            )


def extract_layout(
    layout: DeviceTableLayout, family_prefixes: Sequence[str] = DEFAULT_FAMILY_PREFIXES
) -> list[DeviceRecord]:
    """Extract and assemble the records of one classified device table."""
    count = layout.model_count
    pattern = hardware_identifier_pattern(tuple(family_prefixes))
    try:
        return assemble_devices(
            layout.model_names,
            processor_values(layout.processor, count),
            codename_values(layout.hardware_identifiers, count, pattern),
            release_values(layout.release_initial, count),
            release_values(layout.release_latest, count),
            table_index=layout.table_index,
        )
    except ExtractionError as e:
        raise e.locate(table_index=layout.table_index)


def extract_table(
    table: Tag, table_index: int = 0, family_prefixes: Sequence[str] = DEFAULT_FAMILY_PREFIXES
) -> list[DeviceRecord] | None:
    """Records of a single table, or None when it is not a device table."""
    try:
        layout = classify_device_table(table, table_index, family_prefixes)
    except ExtractionError as e:
        raise e.locate(table_index=table_index)
    if layout is None:
        return None
    return extract_layout(layout, family_prefixes)


@with_operation_context("extract_devices")
def extract_devices(
    document: BeautifulSoup | Tag,
    source: str = "document",
    family_prefixes: Sequence[str] = DEFAULT_FAMILY_PREFIXES,
) -> DeviceExtraction:
    """Extract DeviceRecords from every device table in the document."""
    result = DeviceExtraction(source=source)

    for table_index, table in enumerate(iter_wikitables(document)):
        try:
            records = extract_table(table, table_index, family_prefixes)
        except ExtractionError as e:
            failure = TableFailure.from_exception(source, e, table_index=table_index)
            result.failures.append(failure)
            result.tables_matched += 1
            logger.error(
                "Aborted device table",
                source=source,
                table_index=table_index,
                row_label=failure.row_label,
                error_type=failure.error_type,
                error=failure.message,
            )
            continue

        if records is None:
            continue

        result.tables_matched += 1
        result.records.extend(records)
        for record in records:
            logger.debug("Extracted device", table_index=table_index, device=str(record))

    return result
