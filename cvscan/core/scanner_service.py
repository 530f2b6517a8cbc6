"""Scanner service tying discovery, listing, filtering and writing together."""

from typing import Optional

from ..exporters import SnapshotWriter
from ..k8s import K8sClient, ResourceScanner, TypeCatalog, TypeRegistry
from ..model.config import ScanConfig
from ..model.report import ScanSummary
from ..utils.logger import get_logger
from .capabilities import CapabilityProber
from .filters import ScanFilter, snapshot_file_name
from .helm import HelmVersionSource, VersionSource

logger = get_logger(__name__)


class ScannerService:
    """Runs one sequential snapshot of a cluster."""

    def __init__(
        self,
        client: K8sClient,
        config: ScanConfig,
        registry: Optional[TypeRegistry] = None,
        version_source: Optional[VersionSource] = None,
    ):
        self.client = client
        self.config = config
        self.registry = registry or TypeRegistry()
        self.version_source = version_source or HelmVersionSource(
            binary=config.helm_binary, timeout=config.helm_timeout
        )
        self.scan_filter = ScanFilter(config.owned_kinds_to_skip)

    def run(self) -> ScanSummary:
        """Scan the cluster and write the snapshot.

        Files written before a fatal error stay on disk.

        Raises:
            ScanError: discovery, listing, capability probing or writing failed.
        """
        config = self.config
        logger.info(f"Starting cluster scan into {config.output_dir}")

        writer = SnapshotWriter(config.output_dir)
        catalog = TypeCatalog(
            self.client, self.registry, skip_resources=config.skip_resources
        ).discover(cluster_wide_only=config.cluster_wide_only)

        scanner = ResourceScanner(
            catalog,
            namespace=config.namespace,
            label_selector=config.label_selector,
            multicluster_group_suffix=config.multicluster_group_suffix,
        )
        summary = ScanSummary(resource_types=len(catalog))

        for item in scanner.scan():
            reason = self.scan_filter.should_skip(item)
            if reason is not None:
                summary.record_suppressed(reason)
                continue

            name = snapshot_file_name(item)
            writer.write_item(name, item.payload)
            summary.written_files.append(name)

        summary.tolerated_types = list(scanner.tolerated)

        snapshot = CapabilityProber(self.client, self.version_source).probe(
            namespace=config.namespace, label_selector=config.label_selector
        )
        writer.write_capabilities(snapshot, config.capabilities_file)
        summary.capabilities_file = config.capabilities_file

        logger.info(
            f"Scan complete. Wrote {len(summary.written_files)} objects, "
            f"suppressed {summary.total_suppressed}"
        )
        return summary
