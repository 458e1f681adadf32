# ABOUTME: Rich table utilities for styled display of devices, processors, versions and sync results
# ABOUTME: Provides pre-configured table generators used by the CLI in interactive mode

from collections.abc import Sequence
from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.table import Table

from appledata.core.models import DeviceRecord, ProcessorRecord, TableFailure
from appledata.core.version import Version


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key-value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table with zebra striping.

    Args:
        title: Table title with emoji/styling
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles for zebra striping
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def _version_cell(version: Version) -> str:
    return "[dim]unset[/dim]" if version.is_zero else str(version)


def create_devices_table(devices: Sequence[DeviceRecord]) -> Table:
    """One row per extracted device record."""
    rows = [
        [
            device.model_name,
            ", ".join(device.codenames),
            device.processor or "[dim]unset[/dim]",
            _version_cell(device.min_version),
            _version_cell(device.max_version),
        ]
        for device in devices
    ]
    return create_multi_column_table(
        title=f"📱 Devices ({len(devices)})",
        columns=[
            ("Model", "bold white"),
            ("Codenames", "cyan"),
            ("Processor", "green"),
            ("Initial", "yellow"),
            ("Latest", "yellow"),
        ],
        rows=rows,
    )


def create_processors_table(processors: Sequence[ProcessorRecord]) -> Table:
    return create_multi_column_table(
        title=f"🧠 Processors ({len(processors)})",
        columns=[("Code", "bold cyan"), ("Label", "green")],
        rows=[[processor.code, processor.label] for processor in processors],
    )


def create_versions_table(versions: Sequence[Version]) -> Table:
    """Versions grouped by major release, one row per major."""
    by_major: dict[int, list[str]] = {}
    for version in versions:
        by_major.setdefault(version.major, []).append(str(version))

    return create_multi_column_table(
        title=f"🗂️ Versions ({len(versions)})",
        columns=[("Major", "bold cyan"), ("Count", "magenta"), ("Versions", "white")],
        rows=[[str(major), str(len(items)), ", ".join(items)] for major, items in sorted(by_major.items())],
    )


def create_failures_table(failures: Sequence[TableFailure]) -> Table:
    return create_multi_column_table(
        title=f"🚨 Failures ({len(failures)})",
        columns=[
            ("Source", "white"),
            ("Table", "cyan"),
            ("Row", "cyan"),
            ("Error", "bold red"),
            ("Message", "red"),
        ],
        rows=[
            [
                failure.source,
                "" if failure.table_index is None else str(failure.table_index),
                failure.row_label or "",
                failure.error_type,
                failure.message,
            ]
            for failure in failures
        ],
    )


def create_sync_summary_table(report: Any) -> Table:
    """Create a sync completion summary table.

    Args:
        report: SyncReport returned by AppleDataService.run

    Returns:
        Sync summary table
    """
    summary_data = {
        "🧠 Processors": str(report.processors),
        "🗂️ Versions found": str(report.versions_found),
        "➕ Versions added": str(report.versions_added),
        "📱 Devices": str(report.devices),
        "🏷️ Codenames": str(report.codenames),
        "✅ Success": "Yes" if report.ok else f"No ({len(report.failures)} failures)",
    }

    return create_key_value_table(
        title="🔄 Sync Summary",
        data=summary_data,
        title_style="bold green",
        key_style="cyan",
        value_style="white",
        box_style=SIMPLE,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()
    console.print(table)
    console.print()
