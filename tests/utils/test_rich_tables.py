# ABOUTME: Tests for the rich table builders used by the CLI
# ABOUTME: Renders into a recording console and checks the visible text

from rich.console import Console

from appledata.core.models import DeviceRecord, TableFailure
from appledata.core.service import SyncReport
from appledata.core.version import Version
from appledata.utils.rich_tables import (
    create_devices_table,
    create_failures_table,
    create_sync_summary_table,
    create_versions_table,
)


def render(table) -> str:
    console = Console(record=True, width=160)
    console.print(table)
    return console.export_text()


def test_versions_grouped_by_major():
    output = render(create_versions_table([Version(11, 0, 0), Version(10, 3, 4), Version(11, 1, 0)]))

    assert "Versions (3)" in output
    assert "11.0.0, 11.1.0" in output
    assert output.index("10.3.4") < output.index("11.0.0")


def test_devices_table_marks_unset_fields():
    record = DeviceRecord(model_name="iPhone", codenames=["iPhone1,1"])
    output = render(create_devices_table([record]))

    assert "iPhone1,1" in output
    assert "unset" in output


def test_failures_and_summary():
    failure = TableFailure(
        source="https://wiki.test/models",
        table_index=4,
        row_label="Processor / Chip",
        error_type="StructuralMismatch",
        message="3 values for 2 models",
    )
    report = SyncReport(processors=4, failures=[failure])

    assert "Processor / Chip" in render(create_failures_table([failure]))
    assert "No (1 failures)" in render(create_sync_summary_table(report))
