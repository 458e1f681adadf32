# ABOUTME: Shared fixtures for appledata tests: sample wiki pages and an in-memory database
# ABOUTME: Pages mimic the table shapes of the device list, SoC table and release history pages

from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from appledata.persistence import DatabaseManager

DEVICE_TABLE = """
<table class="wikitable">
  <tr><th>Model</th><th>iPhone X</th><th>iPhone XS</th><th>iPhone XS Max</th></tr>
  <tr><th>Release date</th><td>November 3, 2017</td><td colspan="2">September 21, 2018</td></tr>
  <tr><th>Processor</th><th>Chip</th><td>Apple A11 Bionic<sup class="reference">[3]</sup></td>
      <td colspan="2">Apple A12 Bionic</td></tr>
  <tr><th>Hardware strings</th><td>iPhone10,3<br/>iPhone10,6</td><td>iPhone11,2</td>
      <td>iPhone11,4<br/>iPhone11,6</td></tr>
  <tr><th rowspan="2">Operating system</th><th>Initial</th><td>iOS 11.0.1</td><td colspan="2">iOS 12.0</td></tr>
  <tr><th>Latest</th><td>iOS 16.7.2<sup class="reference">[12]</sup></td><td colspan="2">iOS 17.1</td></tr>
</table>
"""

SOC_TABLE = """
<table class="wikitable">
  <tr><th>Model</th><th>System-on-chip</th><th>RAM</th></tr>
  <tr><td>iPhone 8</td><td rowspan="2">A11 Bionic<sup>[5]</sup></td><td>2 GB</td></tr>
  <tr><td>iPhone X</td><td>3 GB</td></tr>
  <tr><td>iPhone XS</td><td>A12 Bionic</td><td>4 GB</td></tr>
  <tr><td>iPhone 14 Pro</td><td>A16 Bionic</td><td>6 GB</td></tr>
  <tr><td>iPhone 15 Pro</td><td>A17 Pro</td><td>8 GB</td></tr>
  <tr><td>iPhone (1st generation)</td><td>Samsung S5L8900</td><td>128 MB</td></tr>
  <tr><td>iPhone XR</td><td>A12 Bionic</td><td>3 GB</td></tr>
</table>
"""

COMPARISON_TABLE = """
<table class="wikitable">
  <tr><th>Feature</th><th>Notes</th></tr>
  <tr><td>Face ID</td><td>iPhone X and later</td></tr>
</table>
"""

MODELS_PAGE = f"<html><body><h2>Models</h2>{COMPARISON_TABLE}{DEVICE_TABLE}<h2>Chips</h2>{SOC_TABLE}</body></html>"

HISTORY_PAGE = """
<html><body>
<table class="wikitable">
  <tr><th id="16.0">16.0</th><td>20A362</td></tr>
  <tr><th id="16.0.2">16.0.2</th><td>20A380</td></tr>
  <tr><th id="Notes">Notes</th><td>-</td></tr>
  <tr><th id="16.1">16.1</th><td>20B82</td></tr>
</table>
<table><tr><th id="1.0">1.0</th></tr></table>
</body></html>
"""


def release_page(*first_cells: str) -> str:
    """A release page with one "Version" table whose first column holds first_cells."""
    rows = "".join(f"<tr><td>{cell}</td><td>build</td></tr>" for cell in first_cells)
    return (
        "<html><body>"
        f'<table class="wikitable"><tr><th>Version</th><th>Build</th></tr>{rows}</table>'
        '<table class="wikitable"><tr><th>Device</th></tr><tr><td>1.1</td></tr></table>'
        "</body></html>"
    )


HEADLINES_PAGE = """
<html><body>
<h5><span class="mw-headline" id="S5L8930">S5L8930 Apple A4</span></h5>
<h5><span class="mw-headline" id="T8015">T8015 Apple A11 Bionic</span></h5>
<h5><span class="mw-headline" id="Unreleased">Unreleased</span></h5>
<h5><span class="mw-headline" id="T8015_dup">T8015 Apple A11 Bionic</span></h5>
<h3><span class="mw-headline">T8020 Apple A12 Bionic</span></h3>
</body></html>
"""


@pytest.fixture
def models_page() -> str:
    return MODELS_PAGE


@pytest.fixture
def device_table() -> str:
    return DEVICE_TABLE


@pytest.fixture
def soc_table() -> str:
    return SOC_TABLE


@pytest.fixture
def make_release_page():
    return release_page


@pytest.fixture
def history_page() -> str:
    return HISTORY_PAGE


@pytest.fixture
def headlines_page() -> str:
    return HEADLINES_PAGE


WIKI_PAGES = {
    "/wiki/List_of_iPhone_models": MODELS_PAGE,
    "/wiki/IOS_version_history": HISTORY_PAGE,
    "/wiki/Application_Processor": HEADLINES_PAGE,
    "/wiki/IOS_11": release_page("11.0", "11.0.1", "11.1"),
    "/wiki/IOS_17": release_page("17.0", "17.1<br>17.2"),
}


def wiki_handler(request: httpx.Request) -> httpx.Response:
    # processor URLs carry a fragment, so route on the path only
    page = WIKI_PAGES.get(request.url.path)
    if page is None:
        return httpx.Response(404, text="Not Found")
    return httpx.Response(200, text=page)


@pytest.fixture
def wiki_transport() -> httpx.MockTransport:
    """Serve the sample pages under https://wiki.test/wiki/; anything else is a 404."""
    return httpx.MockTransport(wiki_handler)


@pytest_asyncio.fixture
async def temp_db() -> AsyncGenerator[DatabaseManager, None]:
    """Provide an in-memory database manager for async tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    db = DatabaseManager("sqlite+aiosqlite:///:memory:")
    db.engine = engine
    db.async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await db.create_tables()
    yield db
    await db.close()
