# ABOUTME: Processor (system-on-chip) extraction from the wiki SoC table or theiphonewiki headlines
# ABOUTME: Labels are reduced to their "A<n>[X] [Fusion|Bionic|Pro]" prefix; codes replace spaces with "_"

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from appledata.core.models import ProcessorRecord
from appledata.extraction.html import TableCell, iter_wikitables, normalize_whitespace, table_grid
from appledata.extraction.patterns import (
    FOOTNOTE_REFERENCE,
    PROCESSOR_CODE_SEPARATOR,
    PROCESSOR_HEADLINE,
    PROCESSOR_LABEL,
)
from appledata.utils.logging import get_logger, with_operation_context

logger = get_logger(__name__)

SOC_HEADER = "system-on-chip"


def processor_code(label: str) -> str:
    """Stable join key for a processor label, e.g. "A11 Bionic" -> "A11_Bionic"."""
    return label.replace(" ", PROCESSOR_CODE_SEPARATOR)


def match_processor_label(text: str) -> str | None:
    """The recognised processor prefix of a cell text, or None."""
    cleaned = normalize_whitespace(FOOTNOTE_REFERENCE.sub("", text))
    match = PROCESSOR_LABEL.match(cleaned)
    return match.group(1) if match else None


def _soc_column(grid: list[list[TableCell | None]]) -> int | None:
    if not grid:
        return None
    for column, cell in enumerate(grid[0]):
        if cell is not None and cell.is_header and cell.text_without_footnotes().lower() == SOC_HEADER:
            return column
    return None


def _add(records: list[ProcessorRecord], seen: set[str], label: str) -> None:
    code = processor_code(label)
    if code in seen:
        logger.debug("Skipping duplicate processor", code=code)
        return
    seen.add(code)
    records.append(ProcessorRecord(code=code, label=label))


@with_operation_context("extract_processors")
def extract_processors(document: BeautifulSoup | Tag) -> list[ProcessorRecord]:
    """Processors listed in every table whose first row has a System-on-chip header.

    Rows whose label does not look like an A-series chip are skipped, and a
    cell spanning several rows is only read in the row where it is anchored.
    """
    records: list[ProcessorRecord] = []
    seen: set[str] = set()

    for table_index, table in enumerate(iter_wikitables(document)):
        grid = table_grid(table)
        column = _soc_column(grid)
        if column is None:
            continue

        for row_index, row in enumerate(grid[1:], start=1):
            cell = row[column] if column < len(row) else None
            if cell is None or cell.row != row_index:
                continue
            label = match_processor_label(cell.text)
            if label is None:
                logger.debug(
                    "Skipping non-processor row", table_index=table_index, row_index=row_index, text=cell.label
                )
                continue
            _add(records, seen, label)

    return records


@with_operation_context("extract_processors_from_headlines")
def extract_processors_from_headlines(document: BeautifulSoup | Tag) -> list[ProcessorRecord]:
    """Processors from theiphonewiki's "<code> Apple A<n>" section headlines."""
    records: list[ProcessorRecord] = []
    seen: set[str] = set()

    for headline in document.select("h5 span.mw-headline"):
        title = normalize_whitespace(headline.get_text())
        match = PROCESSOR_HEADLINE.match(title)
        if match is None:
            logger.debug("Skipping headline", title=title)
            continue
        code, label = match.group(1), match.group(2)
        if code in seen:
            continue
        seen.add(code)
        records.append(ProcessorRecord(code=code, label=label))

    return records
