# ABOUTME: Header-text driven classification of wiki tables and the rows inside device tables
# ABOUTME: Non-matching tables/rows are expected and return None/UNRECOGNIZED instead of raising

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from bs4 import Tag

from appledata.core.errors import StructuralMismatch
from appledata.extraction.html import TableCell, data_cells, header_cells, normalize_whitespace, table_rows
from appledata.extraction.patterns import DEFAULT_FAMILY_PREFIXES
from appledata.utils.logging import get_logger

logger = get_logger(__name__)


class RowRole(str, Enum):
    """Semantic role of a row in a device table."""

    PROCESSOR = "processor"
    HARDWARE_IDENTIFIERS = "hardware_identifiers"
    RELEASE_INITIAL = "release_initial"
    RELEASE_LATEST = "release_latest"
    UNRECOGNIZED = "unrecognized"


MODEL_HEADER_LABELS = frozenset({"model", "models"})

# Keys are lower-cased header texts; two-cell entries win over one-cell entries
TWO_CELL_VOCABULARY: dict[tuple[str, str], RowRole] = {
    ("processor", "chip"): RowRole.PROCESSOR,
    ("operating system", "initial"): RowRole.RELEASE_INITIAL,
    ("release operating system", "initial"): RowRole.RELEASE_INITIAL,
    ("operating system", "latest"): RowRole.RELEASE_LATEST,
    ("release operating system", "latest"): RowRole.RELEASE_LATEST,
}

ONE_CELL_VOCABULARY: dict[str, RowRole] = {
    "hardware strings": RowRole.HARDWARE_IDENTIFIERS,
    "hardware string": RowRole.HARDWARE_IDENTIFIERS,
    "model identifier": RowRole.HARDWARE_IDENTIFIERS,
    "processor": RowRole.PROCESSOR,
    "initial release operating system": RowRole.RELEASE_INITIAL,
    "latest release operating system": RowRole.RELEASE_LATEST,
    # second half of a pair whose first header cell spans both rows
    "latest": RowRole.RELEASE_LATEST,
}


def _key(label: str) -> str:
    return normalize_whitespace(label).lower()


def classify_row(labels: Sequence[str]) -> RowRole:
    """Map the first one or two header texts of a row to a role."""
    keys = [_key(label) for label in labels[:2]]
    if not keys:
        return RowRole.UNRECOGNIZED
    if len(keys) == 2 and (keys[0], keys[1]) in TWO_CELL_VOCABULARY:
        return TWO_CELL_VOCABULARY[(keys[0], keys[1])]
    return ONE_CELL_VOCABULARY.get(keys[0], RowRole.UNRECOGNIZED)


@dataclass(frozen=True, slots=True)
class ClassifiedRow:
    """A table row with its role, header label and value cells."""

    role: RowRole
    label: str
    index: int
    cells: list[TableCell]


@dataclass(frozen=True, slots=True)
class DeviceTableLayout:
    """Rows of a device table mapped to the roles extraction needs."""

    table_index: int
    model_names: list[str]
    processor: ClassifiedRow
    hardware_identifiers: ClassifiedRow
    release_initial: ClassifiedRow
    release_latest: ClassifiedRow

    @property
    def model_count(self) -> int:
        return len(self.model_names)


def is_device_table(table: Tag, family_prefixes: Sequence[str] = DEFAULT_FAMILY_PREFIXES) -> bool:
    """First row starts with a Model header followed by a model-family header."""
    rows = table_rows(table)
    if not rows:
        return False
    headers = header_cells(rows[0])
    if len(headers) < 2:
        return False
    if _key(headers[0].text) not in MODEL_HEADER_LABELS:
        return False
    second = headers[1].label.lower()
    return any(second.startswith(prefix.lower()) for prefix in family_prefixes)


def _classified(row: Tag, index: int, role: RowRole) -> ClassifiedRow:
    labels = [cell.label for cell in header_cells(row, index)]
    return ClassifiedRow(role=role, label=" / ".join(labels[:2]), index=index, cells=data_cells(row, index))


def classify_device_table(
    table: Tag, table_index: int = 0, family_prefixes: Sequence[str] = DEFAULT_FAMILY_PREFIXES
) -> DeviceTableLayout | None:
    """Locate the processor, hardware identifier and release rows of a device table.

    Returns:
        The layout, or None when the table is not a device table

    Raises:
        StructuralMismatch: the table is a device table but a required row,
            or the row following the initial release row, is missing
    """
    if not is_device_table(table, family_prefixes):
        logger.debug("Skipping table without device header", table_index=table_index)
        return None

    rows = table_rows(table)
    model_names = [cell.label for cell in header_cells(rows[0])[1:]]
    found: dict[RowRole, ClassifiedRow] = {}

    index = 1
    while index < len(rows):
        row = rows[index]
        labels = [cell.label for cell in header_cells(row, index)[:2]]
        role = classify_row(labels)

        if role is RowRole.UNRECOGNIZED or role in found:
            index += 1
            continue

        if role is RowRole.RELEASE_LATEST:
            # only meaningful as the second half of a release pair
            logger.debug("Ignoring unpaired latest release row", table_index=table_index, row_index=index)
            index += 1
            continue

        current = _classified(row, index, role)
        if role is RowRole.RELEASE_INITIAL:
            follower_index = index + 1
            if follower_index >= len(rows):
                raise StructuralMismatch(
                    "Initial release row is not followed by a latest release row",
                    table_index=table_index,
                    row_label=current.label,
                )
            follower = rows[follower_index]
            follower_role = classify_row([cell.label for cell in header_cells(follower, follower_index)[:2]])
            if follower_role is not RowRole.RELEASE_LATEST:
                raise StructuralMismatch(
                    f"Row after initial release row classified as {follower_role.value}, expected latest release",
                    table_index=table_index,
                    row_label=current.label,
                )
            found[RowRole.RELEASE_INITIAL] = current
            found[RowRole.RELEASE_LATEST] = _classified(follower, follower_index, RowRole.RELEASE_LATEST)
            index = follower_index + 1
            continue

        found[role] = current
        index += 1

    required = (RowRole.PROCESSOR, RowRole.HARDWARE_IDENTIFIERS, RowRole.RELEASE_INITIAL)
    missing = [role.value for role in required if role not in found]
    if missing:
        raise StructuralMismatch(
            f"Device table is missing required rows: {', '.join(missing)}", table_index=table_index
        )

    layout = DeviceTableLayout(
        table_index=table_index,
        model_names=model_names,
        processor=found[RowRole.PROCESSOR],
        hardware_identifiers=found[RowRole.HARDWARE_IDENTIFIERS],
        release_initial=found[RowRole.RELEASE_INITIAL],
        release_latest=found[RowRole.RELEASE_LATEST],
    )
    logger.debug(
        "Classified device table",
        table_index=table_index,
        models=model_names,
        rows={role.value: row.index for role, row in found.items()},
    )
    return layout
