"""Data models for cvscan."""

from .cluster import Capabilities, CapabilitySnapshot, ClusterVersion
from .config import ScanConfig
from .kubernetes import OwnerReference, ResourceType, ScanItem
from .report import ScanSummary, SkipReason

__all__ = [
    "Capabilities",
    "CapabilitySnapshot",
    "ClusterVersion",
    "ScanConfig",
    "OwnerReference",
    "ResourceType",
    "ScanItem",
    "ScanSummary",
    "SkipReason",
]
