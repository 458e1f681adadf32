# ABOUTME: CLI tests for the appledata asyncclick application
# ABOUTME: Commands run against the sample wiki transport and a temporary SQLite file

import pytest
from asyncclick.testing import CliRunner

from appledata.config import Config
from appledata.core.service import AppleDataService
from appledata.main import app as main
from appledata.wiki import WikiClient

BASE = "https://wiki.test/wiki"


@pytest.fixture
def cli_env(tmp_path, monkeypatch, wiki_transport):
    """Run commands inside tmp_path with services that read from the sample wiki."""
    monkeypatch.chdir(tmp_path)
    sample_config = Config(
        device_list_url=f"{BASE}/List_of_iPhone_models",
        version_history_url=f"{BASE}/IOS_version_history",
        release_pages=[f"{BASE}/IOS_11", f"{BASE}/IOS_12", f"{BASE}/IOS_17"],
        processor_page_url=f"{BASE}/List_of_iPhone_models#iPhone_systems-on-chips",
        theiphonewiki_processor_url=f"{BASE}/Application_Processor",
        requests_per_second=0,
        max_retries=1,
    )

    def build_service(database=None, config=None, processor_source="wikipedia"):
        client = WikiClient(config=sample_config, transport=wiki_transport, min_wait=0, max_wait=0)
        return AppleDataService(
            client=client, database=database, config=sample_config, processor_source=processor_source
        )

    monkeypatch.setattr("appledata.main.AppleDataService", build_service)
    return tmp_path


def test_main_function_exists():
    """Test that the main group exists and is callable."""
    assert callable(main)


@pytest.mark.asyncio
async def test_main_command_help():
    runner = CliRunner()
    result = await runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "appledata" in result.output
    for command in ("sync", "devices", "processors", "versions", "logging-status"):
        assert command in result.output


@pytest.mark.asyncio
async def test_main_with_logging_status(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = await runner.invoke(main, ["logging-status"])

    assert result.exit_code == 0
    assert "Logging Configuration" in result.output


@pytest.mark.asyncio
async def test_processors_command(cli_env):
    result = await CliRunner().invoke(main, ["processors"])

    assert result.exit_code == 0
    assert "Processors (4)" in result.output
    assert "A17_Pro" in result.output


@pytest.mark.asyncio
async def test_processors_command_theiphonewiki(cli_env):
    result = await CliRunner().invoke(main, ["processors", "--source", "theiphonewiki"])

    assert result.exit_code == 0
    assert "Processors (2)" in result.output
    assert "S5L8930" in result.output


@pytest.mark.asyncio
async def test_devices_command(cli_env):
    result = await CliRunner().invoke(main, ["devices"])

    assert result.exit_code == 0
    assert "Devices (3)" in result.output
    assert "iPhone10,3" in result.output


@pytest.mark.asyncio
async def test_versions_command_reports_missing_page(cli_env):
    result = await CliRunner().invoke(main, ["versions", "--summary"])

    assert result.exit_code == 0
    assert "Versions (9)" in result.output
    assert "Failures (1)" in result.output


@pytest.mark.asyncio
async def test_sync_command(cli_env):
    database_url = f"sqlite+aiosqlite:///{cli_env / 'cli.sqlite'}"

    result = await CliRunner().invoke(main, ["sync", "--database-url", database_url])

    assert result.exit_code == 0
    assert "Sync Summary" in result.output
    assert (cli_env / "cli.sqlite").exists()


@pytest.mark.asyncio
async def test_sync_command_strict_fails_on_page_errors(cli_env):
    database_url = f"sqlite+aiosqlite:///{cli_env / 'strict.sqlite'}"

    result = await CliRunner().invoke(main, ["sync", "--strict", "--database-url", database_url])

    assert result.exit_code == 1
