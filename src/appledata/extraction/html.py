# ABOUTME: Read-only helpers over BeautifulSoup documents: tables, rows, cells and span expansion
# ABOUTME: TableCell is the transient cell snapshot every extractor works from

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from appledata.extraction.patterns import FOOTNOTE_MARKUP, FOOTNOTE_REFERENCE, LINE_BREAK


def parse_document(html: str) -> BeautifulSoup:
    """Parse an HTML page with the stdlib-backed parser."""
    return BeautifulSoup(html, "html.parser")


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def strip_footnotes(markup: str) -> str:
    """Plain text of a markup fragment without <sup> blocks or [n] references."""
    without_sup = LINE_BREAK.sub(" ", FOOTNOTE_MARKUP.sub("", markup))
    text = BeautifulSoup(without_sup, "html.parser").get_text()
    return normalize_whitespace(FOOTNOTE_REFERENCE.sub("", text))


def _span(tag: Tag, attribute: str) -> int:
    raw = tag.get(attribute)
    if raw is None:
        return 1
    try:
        value = int(str(raw).strip())
    except ValueError:
        return 1
    return value if value > 0 else 1


@dataclass(frozen=True, slots=True)
class TableCell:
    """Snapshot of one table cell; never written back to the document."""

    text: str
    html: str
    colspan: int = 1
    rowspan: int = 1
    row: int = 0
    column: int = 0
    is_header: bool = False

    @classmethod
    def from_tag(cls, tag: Tag, row: int = 0, column: int = 0) -> TableCell:
        return cls(
            text=tag.get_text(),
            html=tag.decode_contents(),
            colspan=_span(tag, "colspan"),
            rowspan=_span(tag, "rowspan"),
            row=row,
            column=column,
            is_header=tag.name == "th",
        )

    @property
    def label(self) -> str:
        return normalize_whitespace(self.text)

    def text_without_footnotes(self) -> str:
        return strip_footnotes(self.html)


def iter_wikitables(document: BeautifulSoup | Tag) -> Iterator[Tag]:
    """Yield wiki tables, or every table when none carries the wikitable class."""
    tables = document.select("table.wikitable")
    if not tables:
        tables = document.find_all("table")
    yield from tables


def table_rows(table: Tag) -> list[Tag]:
    return table.find_all("tr")


def row_cells(row: Tag, row_index: int = 0) -> list[TableCell]:
    """All th/td children of a row in source order, columns counted by colspan."""
    cells = []
    column = 0
    for tag in row.find_all(["th", "td"], recursive=False):
        cell = TableCell.from_tag(tag, row=row_index, column=column)
        cells.append(cell)
        column += cell.colspan
    return cells


def header_cells(row: Tag, row_index: int = 0) -> list[TableCell]:
    return [cell for cell in row_cells(row, row_index) if cell.is_header]


def data_cells(row: Tag, row_index: int = 0) -> list[TableCell]:
    return [cell for cell in row_cells(row, row_index) if not cell.is_header]


def row_labels(row: Tag, limit: int = 2) -> list[str]:
    """Normalised text of the first header cells of a row."""
    return [cell.label for cell in header_cells(row)[:limit]]


def table_grid(table: Tag) -> list[list[TableCell | None]]:
    """Expand rowspans and colspans into a rectangular grid.

    A spanning cell occupies every slot it covers; its row/column attributes
    keep pointing at the slot where it is anchored in the markup.
    """
    rows = table_rows(table)
    occupied: dict[tuple[int, int], TableCell] = {}
    width = 0

    for row_index, row in enumerate(rows):
        column = 0
        for tag in row.find_all(["th", "td"], recursive=False):
            while (row_index, column) in occupied:
                column += 1
            cell = TableCell.from_tag(tag, row=row_index, column=column)
            for dr in range(min(cell.rowspan, len(rows) - row_index)):
                for dc in range(cell.colspan):
                    occupied[(row_index + dr, column + dc)] = cell
            column += cell.colspan
        width = max(width, column)

    for (_, column) in occupied:
        width = max(width, column + 1)

    return [[occupied.get((r, c)) for c in range(width)] for r in range(len(rows))]
