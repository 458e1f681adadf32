# ABOUTME: Firmware version scan over the version-history summary page and per-release pages
# ABOUTME: Results keep document order and are not deduplicated; persistence ignores repeats

from __future__ import annotations

from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag

from appledata.core.errors import VersionFormatError
from appledata.core.version import Version
from appledata.extraction.html import (
    header_cells,
    iter_wikitables,
    normalize_whitespace,
    row_cells,
    table_rows,
)
from appledata.extraction.patterns import (
    FOOTNOTE_MARKUP,
    FOOTNOTE_REFERENCE,
    LINE_BREAK,
    RELEASE_VERSION_TOKEN,
    VERSION_ID,
)
from appledata.utils.logging import get_logger, with_operation_context

logger = get_logger(__name__)

RELEASE_TABLE_HEADER = "version"


@with_operation_context("extract_versions_from_summary")
def extract_versions_from_summary(document: BeautifulSoup | Tag) -> list[Version]:
    """Versions named by the id attribute of wikitable header cells.

    The history page anchors every release row with an id such as "16.4.1";
    ids that are not version shaped are skipped.
    """
    versions: list[Version] = []
    for cell in document.select(".wikitable th[id]"):
        anchor = str(cell.get("id", "")).strip()
        if not VERSION_ID.match(anchor):
            logger.debug("Skipping non-version header id", id=anchor)
            continue
        try:
            versions.append(Version.parse(anchor))
        except VersionFormatError as e:
            logger.warning("Unparseable version id", id=anchor, error=str(e))
    return versions


def is_release_table(table: Tag) -> bool:
    rows = table_rows(table)
    if not rows:
        return False
    headers = header_cells(rows[0])
    return bool(headers) and headers[0].label.lower() == RELEASE_TABLE_HEADER


def versions_in_cell_markup(markup: str) -> list[Version]:
    """First version token of every <br>-separated line of a cell."""
    versions = []
    for fragment in LINE_BREAK.split(FOOTNOTE_MARKUP.sub("", markup)):
        text = normalize_whitespace(FOOTNOTE_REFERENCE.sub("", BeautifulSoup(fragment, "html.parser").get_text()))
        match = RELEASE_VERSION_TOKEN.search(text)
        if match is None:
            continue
        versions.append(Version.parse(match.group(0)))
    return versions


@with_operation_context("extract_versions_from_release_page")
def extract_versions_from_release_page(document: BeautifulSoup | Tag) -> list[Version]:
    """Versions listed in the first column of every table headed "Version"."""
    versions: list[Version] = []
    for table_index, table in enumerate(iter_wikitables(document)):
        if not is_release_table(table):
            continue
        for row_index, row in enumerate(table_rows(table)[1:], start=1):
            cells = row_cells(row, row_index)
            if not cells:
                continue
            found = versions_in_cell_markup(cells[0].html)
            if not found:
                logger.debug("Release row without version", table_index=table_index, row_index=row_index)
            versions.extend(found)
    return versions


def extract_versions_from_pages(documents: Iterable[BeautifulSoup | Tag]) -> list[Version]:
    """Concatenate release-page versions in page order."""
    versions: list[Version] = []
    for document in documents:
        versions.extend(extract_versions_from_release_page(document))
    return versions
