"""Report-related models."""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class SkipReason(str, Enum):
    """Why a retrieved object was left out of the snapshot."""

    OWNED = "owned"
    SERVICE_ACCOUNT_TOKEN = "service-account-token"
    PROVISIONED_SERVICE = "provisioned-service"


class ScanSummary(BaseModel):
    """Outcome of a single scan run."""

    resource_types: int = 0
    tolerated_types: List[str] = Field(default_factory=list)
    written_files: List[str] = Field(default_factory=list)
    suppressed: Dict[SkipReason, int] = Field(default_factory=dict)
    capabilities_file: str = ""

    @property
    def total_suppressed(self) -> int:
        """Get the number of objects dropped by any filter."""
        return sum(self.suppressed.values())

    def record_suppressed(self, reason: SkipReason) -> None:
        """Count one object dropped for the given reason."""
        self.suppressed[reason] = self.suppressed.get(reason, 0) + 1
