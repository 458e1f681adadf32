# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands to sync the catalogue database and to preview extracted records

import json as jsonlib

import asyncclick as click
from rich.console import Console
from rich.panel import Panel

from appledata.config import get_config
from appledata.core.models import TableFailure
from appledata.core.service import AppleDataService, SyncReport
from appledata.persistence import DatabaseManager
from appledata.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logging_status,
    with_sync_context,
)
from appledata.utils.rich_tables import (
    create_devices_table,
    create_failures_table,
    create_logging_status_table,
    create_processors_table,
    create_sync_summary_table,
    create_versions_table,
    print_rich_table,
)

console = Console()

PROCESSOR_SOURCES = ["wikipedia", "theiphonewiki"]


def _emit_json(payload) -> None:
    click.echo(jsonlib.dumps(payload, indent=2, default=str))


def _display_failures(failures: list[TableFailure]) -> None:
    if failures:
        print_rich_table(console, create_failures_table(failures))


@click.command()
@click.option("--database-url", help="Database URL (defaults to APPLEDATA_DATABASE_URL)")
@click.option("--strict", is_flag=True, help="Exit with status 1 when any page or table failed")
@click.option(
    "--processor-source",
    type=click.Choice(PROCESSOR_SOURCES),
    default="wikipedia",
    show_default=True,
    help="Where processor labels are read from",
)
@click.pass_context
async def sync(ctx, database_url: str | None, strict: bool, processor_source: str):
    """
    🔄 Fetch processors, firmware versions and devices and store them.

    Devices are linked to every stored version inside their supported range.
    """
    json_output = ctx.obj["json_output"]
    config = get_config()
    database = DatabaseManager(database_url or config.database_url)
    service = AppleDataService(database=database, config=config, processor_source=processor_source)

    with with_sync_context(database_url=database.database_url) as logger:
        if not json_output:
            console.print(Panel.fit("📱 [bold cyan]appledata sync[/bold cyan]", border_style="magenta"))

        try:
            report: SyncReport = await service.run()
        finally:
            await service.close()

        logger.info("Sync complete", **{k: v for k, v in report.to_dict().items() if k != "failures"})

    if json_output:
        _emit_json(report.to_dict())
    else:
        print_rich_table(console, create_sync_summary_table(report))
        _display_failures(report.failures)

    if strict and not report.ok:
        ctx.exit(1)


@click.command()
@click.pass_context
async def devices(ctx):
    """
    📱 Extract and print device records without touching the database.
    """
    json_output = ctx.obj["json_output"]
    service = AppleDataService()
    failures: list[TableFailure] = []
    try:
        records = await service.fetch_devices(failures)
    finally:
        await service.close()

    if json_output:
        _emit_json(
            {
                "devices": [record.model_dump(mode="json") for record in records],
                "failures": [failure.model_dump() for failure in failures],
            }
        )
        return

    print_rich_table(console, create_devices_table(records))
    _display_failures(failures)


@click.command()
@click.option(
    "--source",
    type=click.Choice(PROCESSOR_SOURCES),
    default="wikipedia",
    show_default=True,
    help="Where processor labels are read from",
)
@click.pass_context
async def processors(ctx, source: str):
    """
    🧠 Extract and print processor records without touching the database.
    """
    json_output = ctx.obj["json_output"]
    service = AppleDataService(processor_source=source)
    failures: list[TableFailure] = []
    try:
        records = await service.fetch_processors(failures)
    finally:
        await service.close()

    if json_output:
        _emit_json(
            {
                "processors": [record.model_dump() for record in records],
                "failures": [failure.model_dump() for failure in failures],
            }
        )
        return

    print_rich_table(console, create_processors_table(records))
    _display_failures(failures)


@click.command()
@click.option("--summary", is_flag=True, help="Also scan the version history summary page")
@click.pass_context
async def versions(ctx, summary: bool):
    """
    🗂️ Extract and print firmware versions without touching the database.
    """
    json_output = ctx.obj["json_output"]
    service = AppleDataService()
    failures: list[TableFailure] = []
    try:
        found = await service.fetch_versions(include_summary=summary, failures=failures)
    finally:
        await service.close()

    if json_output:
        _emit_json(
            {
                "versions": [str(version) for version in found],
                "failures": [failure.model_dump() for failure in failures],
            }
        )
        return

    print_rich_table(console, create_versions_table(found))
    _display_failures(failures)


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    try:
        config = get_config()
        mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

        # Use config defaults when CLI parameters are not provided
        final_log_level = log_level or config.log_level
        final_log_file = log_file or (str(config.log_file) if config.log_file else None)

        configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)
    except (FileNotFoundError, PermissionError, OSError):
        mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE
        final_log_level = log_level or "INFO"
        configure_logging(mode=mode, log_level=final_log_level, log_file=log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON instead of rich tables")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    📱 appledata - iPhone models, processors and iOS releases from wiki tables

    Scrapes the device, system-on-chip and version history tables and keeps
    a SQLite catalogue linking each device to the releases it supports.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(sync)
app.add_command(devices)
app.add_command(processors)
app.add_command(versions)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
