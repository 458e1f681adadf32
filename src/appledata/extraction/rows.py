# ABOUTME: Turns classified device-table rows into one value per model, expanding colspans
# ABOUTME: Per-role cell extractors for processor labels, hardware codenames and release versions

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from appledata.core.errors import ExtractionError, PatternNotFound, StructuralMismatch
from appledata.core.version import Version
from appledata.extraction.classifier import ClassifiedRow
from appledata.extraction.html import TableCell, normalize_whitespace
from appledata.extraction.patterns import FOOTNOTE_REFERENCE, HARDWARE_IDENTIFIER, VERSION_TOKEN

T = TypeVar("T")


def expand_row(
    cells: Sequence[TableCell],
    extract: Callable[[TableCell], T],
    model_count: int,
    label: str = "",
) -> list[T]:
    """Extract each cell once and give its value to every model slot it spans.

    Raises:
        StructuralMismatch: the expanded value count differs from model_count
    """
    values: list[T] = []
    for cell in cells:
        try:
            value = extract(cell)
        except ExtractionError as e:
            raise e.locate(row_label=label)
        values.extend([value] * cell.colspan)

    if len(values) != model_count:
        raise StructuralMismatch(
            f"Row yields {len(values)} values after colspan expansion but the header declares {model_count} models",
            row_label=label,
        )
    return values


def extract_processor(cell: TableCell) -> str:
    """Cell text without [n] footnote markers; empty string when unset."""
    return normalize_whitespace(FOOTNOTE_REFERENCE.sub("", cell.text))


def extract_codenames(cell: TableCell, pattern: re.Pattern[str] = HARDWARE_IDENTIFIER) -> list[str]:
    """Every hardware identifier in the cell markup, unique and in order of first appearance.

    Raises:
        PatternNotFound: the cell holds no identifier
    """
    codenames: list[str] = []
    for match in pattern.finditer(cell.html):
        token = match.group(0).strip()
        if token not in codenames:
            codenames.append(token)

    if not codenames:
        raise PatternNotFound(f"No hardware identifier in cell: {normalize_whitespace(cell.text)!r}")
    return codenames


def extract_release_version(cell: TableCell) -> Version | None:
    """First version token of the cell, ignoring footnotes.

    Returns:
        The parsed version, or None when the cell is empty

    Raises:
        PatternNotFound: the cell has text but no version token
        VersionFormatError: the token does not parse
    """
    text = cell.text_without_footnotes()
    if not text:
        return None
    match = VERSION_TOKEN.search(text)
    if match is None:
        raise PatternNotFound(f"No version in cell: {text!r}")
    return Version.parse(match.group(0))


def processor_values(row: ClassifiedRow, model_count: int) -> list[str]:
    return expand_row(row.cells, extract_processor, model_count, row.label)


def codename_values(
    row: ClassifiedRow, model_count: int, pattern: re.Pattern[str] = HARDWARE_IDENTIFIER
) -> list[list[str]]:
    values = expand_row(row.cells, lambda cell: extract_codenames(cell, pattern), model_count, row.label)
    # colspan repeats the same list object; give each model its own
    return [list(codenames) for codenames in values]


def release_values(row: ClassifiedRow, model_count: int) -> list[Version | None]:
    return expand_row(row.cells, extract_release_version, model_count, row.label)
