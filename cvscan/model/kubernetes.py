"""Kubernetes resource models."""

from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field


class ResourceType(BaseModel):
    """Kubernetes resource type information."""

    name: str
    kind: str
    namespaced: bool = False
    group: str = ""
    version: str = "v1"

    @property
    def group_version(self) -> str:
        """Get the group/version string, bare version for the core group."""
        return f"{self.group}/{self.version}" if self.group else self.version


class OwnerReference(BaseModel):
    """Link from a child object to the controller that manages it."""

    kind: str
    name: str
    api_version: Optional[str] = Field(None, alias="apiVersion")
    uid: Optional[str] = None
    controller: Optional[bool] = None

    class Config:
        populate_by_name = True


class ScanItem(BaseModel):
    """A live object retrieved from the cluster."""

    api_version: str = ""
    kind: str
    namespace: str = ""
    name: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    owner_references: List[OwnerReference] = Field(default_factory=list)
    payload: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_object(cls, obj: Dict[str, Any]) -> "ScanItem":
        """Build an item from a full object as returned by the API server."""
        metadata = obj.get("metadata") or {}
        return cls(
            api_version=obj.get("apiVersion", ""),
            kind=obj.get("kind", ""),
            namespace=metadata.get("namespace") or "",
            name=metadata.get("name") or "",
            labels=metadata.get("labels") or {},
            annotations=metadata.get("annotations") or {},
            owner_references=[
                OwnerReference(**ref) for ref in metadata.get("ownerReferences") or []
            ],
            payload=obj,
        )

    @property
    def owner_kinds(self) -> List[str]:
        """Get the kinds of all owners, in declaration order."""
        return [ref.kind for ref in self.owner_references]
