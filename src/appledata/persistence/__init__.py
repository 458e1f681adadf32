# ABOUTME: Database operations and data persistence layer
# ABOUTME: SQLModel tables for processors, devices and releases plus the async DatabaseManager

"""
Persistence Layer: Save and query the device catalogue

This layer handles:
- SQLModel tables and the device/release association
- Idempotent upserts keyed by processor code, codename and version
- Reporting view and lookup queries

Data Flow: extraction/ records → Database → CLI and reports
"""

from .manager import DatabaseManager
from .models import Device, DeviceOperatingSystemLink, OperatingSystem, Processor

__all__ = [
    "DatabaseManager",
    "Device",
    "DeviceOperatingSystemLink",
    "OperatingSystem",
    "Processor",
]
