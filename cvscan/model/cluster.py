"""Cluster-related models."""

from typing import List, Optional
from pydantic import BaseModel, Field


class ClusterVersion(BaseModel):
    """Kubernetes version information as served by /version."""

    major: str = ""
    minor: str = ""
    git_version: str = Field("", alias="gitVersion")
    git_commit: Optional[str] = Field(None, alias="gitCommit")
    git_tree_state: Optional[str] = Field(None, alias="gitTreeState")
    build_date: Optional[str] = Field(None, alias="buildDate")
    go_version: Optional[str] = Field(None, alias="goVersion")
    compiler: Optional[str] = None
    platform: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class Capabilities(BaseModel):
    """API surface and software versions exposed by a cluster."""

    kube_version: Optional[ClusterVersion] = Field(None, alias="kubeVersion")
    api_versions: List[str] = Field(default_factory=list, alias="apiVersions")
    external_tool_version: Optional[str] = Field(None, alias="externalToolVersion")

    class Config:
        populate_by_name = True


class CapabilitySnapshot(BaseModel):
    """Capability descriptor written next to the scanned objects."""

    capabilities: Capabilities = Field(default_factory=Capabilities)
    namespace: str = ""
    release_name: str = Field("", alias="releaseName")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        """Render with the wire field names, leaving out unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
