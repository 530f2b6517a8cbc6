"""Core business logic."""

from .capabilities import CapabilityProber, parse_release_name
from .filters import ScanFilter, snapshot_file_name
from .helm import HelmVersionSource, VersionSource
from .scanner_service import ScannerService

__all__ = [
    "CapabilityProber",
    "parse_release_name",
    "ScanFilter",
    "snapshot_file_name",
    "HelmVersionSource",
    "VersionSource",
    "ScannerService",
]
