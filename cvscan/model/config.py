"""Scan configuration model."""

import json
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ScanError

# Resource types never worth listing.
DEFAULT_SKIP_RESOURCES = [
    "componentstatuses",
    "controllerrevisions",
    "events",
    "endpoints",
    "packagemanifests",
]

# Child kind -> owner kinds whose children are regenerated by a controller.
DEFAULT_OWNED_KINDS_TO_SKIP: Dict[str, List[str]] = {
    "Pod": [
        "ReplicationController",
        "ReplicaSet",
        "StatefulSet",
        "DaemonSet",
        "Job",
    ],
    "ReplicaSet": ["Deployment"],
    "Job": ["CronJob"],
}

# Multi-cluster manager groups need an extra credential the scan never sends.
DEFAULT_MULTICLUSTER_GROUP_SUFFIX = ".clusterapi.io"


class ScanConfig(BaseModel):
    """Settings for one scan run."""

    namespace: str = ""
    label_selector: str = ""
    output_dir: Path = Path("./cluster-scan")
    cluster_wide_only: bool = False
    kubeconfig: Optional[Path] = None
    context: Optional[str] = None
    skip_resources: List[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_RESOURCES))
    owned_kinds_to_skip: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_OWNED_KINDS_TO_SKIP.items()}
    )
    multicluster_group_suffix: str = DEFAULT_MULTICLUSTER_GROUP_SUFFIX
    helm_binary: str = "helm"
    helm_timeout: float = 30.0
    capabilities_file: str = "caps.json"

    @classmethod
    def load(cls, config_path: Path) -> "ScanConfig":
        """Load settings from a YAML or JSON file."""
        config_path = Path(config_path)
        try:
            with open(config_path, "r") as f:
                if config_path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ScanError(f"reading config {config_path}: {e}") from e

        try:
            return cls(**(data or {}))
        except ValidationError as e:
            raise ScanError(f"invalid config {config_path}: {e}") from e
