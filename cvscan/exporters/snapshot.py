"""Snapshot file writer."""

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import ScanError
from ..model.cluster import CapabilitySnapshot
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CAPABILITIES_FILE = "caps.json"


class SnapshotWriter:
    """Writes scanned objects and the capability descriptor into one directory.

    Files are overwritten unconditionally and never rolled back.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ScanError(f"creating output directory: {e}") from e

    def write(self, name: str, data: bytes) -> Path:
        """Write raw bytes to a file in the output directory."""
        filepath = self.output_dir / name
        try:
            filepath.write_bytes(data)
        except OSError as e:
            raise ScanError(f"writing {filepath}: {e}") from e
        return filepath

    def write_item(self, name: str, payload: Dict[str, Any]) -> Path:
        """Write one object as YAML."""
        try:
            data = yaml.safe_dump(payload, default_flow_style=False, sort_keys=True)
        except yaml.YAMLError as e:
            raise ScanError(f"creating YAML for {name}: {e}") from e
        filepath = self.write(name, data.encode("utf-8"))
        logger.debug(f"Wrote {filepath}")
        return filepath

    def write_capabilities(
        self, snapshot: CapabilitySnapshot, name: str = DEFAULT_CAPABILITIES_FILE
    ) -> Path:
        """Write the capability descriptor as JSON."""
        try:
            data = json.dumps(snapshot.to_document(), indent=2)
        except (TypeError, ValueError) as e:
            raise ScanError(f"marshaling capabilities to JSON: {e}") from e
        filepath = self.write(name, data.encode("utf-8"))
        logger.info(f"Wrote capabilities to {filepath}")
        return filepath
