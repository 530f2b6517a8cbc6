"""Cluster capability probing."""

import re
from typing import Optional

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from ..errors import ScanError
from ..k8s.client import K8sClient, describe_error
from ..model.cluster import Capabilities, CapabilitySnapshot, ClusterVersion
from ..utils.logger import get_logger
from .helm import VersionSource

logger = get_logger(__name__)

RELEASE_PATTERN = re.compile(r"release=(.*?)(,|\Z)")


def parse_release_name(label_selector: str) -> str:
    """Get the ``release=`` value from a label selector, or an empty string."""
    match = RELEASE_PATTERN.search(label_selector or "")
    return match.group(1) if match else ""


class CapabilityProber:
    """Builds the capability descriptor for a cluster."""

    def __init__(self, client: K8sClient, version_source: Optional[VersionSource] = None):
        self.client = client
        self.version_source = version_source

    def probe(self, namespace: str = "", label_selector: str = "") -> CapabilitySnapshot:
        """Read server version, API versions and the external tool version.

        Raises:
            ScanError: the server version or the API group set could not be read.
        """
        return CapabilitySnapshot(
            capabilities=self.get_capabilities(),
            namespace=namespace,
            release_name=parse_release_name(label_selector),
        )

    def get_capabilities(self) -> Capabilities:
        capabilities = Capabilities()

        try:
            capabilities.kube_version = ClusterVersion(**self.client.get_version())
        except (ApiException, HTTPError) as e:
            raise ScanError(f"server version: {describe_error(e)}") from e

        try:
            api_versions = set(self.client.get_core_versions())
            for group in self.client.get_api_groups():
                api_versions.update(
                    v["groupVersion"] for v in group.get("versions") or [] if v.get("groupVersion")
                )
        except (ApiException, HTTPError) as e:
            raise ScanError(f"server groups: {describe_error(e)}") from e

        if not api_versions:
            return capabilities
        capabilities.api_versions = sorted(api_versions)

        if self.version_source is not None:
            capabilities.external_tool_version = self.version_source.version()
            if capabilities.external_tool_version:
                logger.info(f"Tiller version {capabilities.external_tool_version}")

        return capabilities
