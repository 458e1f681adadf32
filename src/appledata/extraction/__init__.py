# ABOUTME: Table extraction from parsed wiki pages (devices, processors, firmware versions)
# ABOUTME: Pure and synchronous: takes a BeautifulSoup document, performs no I/O

"""
Extraction Layer: Turn wiki tables into records

This layer handles:
- Recognising device tables and the role of each row
- Expanding colspans into one value per model
- Assembling device records, processor records and version lists

Data Flow: Parsed HTML → Records → core/ service
"""

from .devices import DeviceExtraction, extract_devices
from .processors import extract_processors, extract_processors_from_headlines
from .versions import extract_versions_from_pages, extract_versions_from_release_page, extract_versions_from_summary

__all__ = [
    "DeviceExtraction",
    "extract_devices",
    "extract_processors",
    "extract_processors_from_headlines",
    "extract_versions_from_pages",
    "extract_versions_from_release_page",
    "extract_versions_from_summary",
]
