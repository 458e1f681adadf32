# ABOUTME: Domain types and orchestration layer
# ABOUTME: Versions, records, error taxonomy and the sync service that ties fetch, extract and store together

"""
Core Layer: Domain types and workflow orchestration

This layer handles:
- Firmware version values, ordering and ranges
- Device and processor records produced by extraction
- Error types shared by extraction and orchestration
- The sync service that runs processors, versions and devices in order

Data Flow: wiki/ pages → extraction/ records → persistence/ rows
"""

from .errors import ExtractionError, PatternNotFound, StructuralMismatch, VersionFormatError
from .models import DeviceRecord, ProcessorRecord, TableFailure
from .version import Ordering, Version, VersionRange, VersionRangeLimit, compare, in_range

# Import service on-demand to avoid circular imports
# Use: from appledata.core.service import AppleDataService

__all__ = [
    "DeviceRecord",
    "ExtractionError",
    "Ordering",
    "PatternNotFound",
    "ProcessorRecord",
    "StructuralMismatch",
    "TableFailure",
    "Version",
    "VersionFormatError",
    "VersionRange",
    "VersionRangeLimit",
    "compare",
    "in_range",
]
