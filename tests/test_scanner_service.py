"""End-to-end tests for a scan run against a fake API server."""

import json
from unittest.mock import Mock

import pytest
import yaml

from kubernetes.client.exceptions import ApiException

from cvscan.core.filters import PROVISIONED_FOR_PVC_LABEL, SERVICE_ACCOUNT_UID_ANNOTATION
from cvscan.core.scanner_service import ScannerService
from cvscan.errors import DiscoveryError, ScanError
from cvscan.model.config import ScanConfig
from cvscan.model.report import SkipReason

from conftest import k8s_object


@pytest.fixture
def cluster_objects(fake_api):
    """Populate the fake API server with a small workload."""
    fake_api.routes.update(
        {
            "/api/v1/pods": {
                "kind": "PodList",
                "apiVersion": "v1",
                "items": [
                    k8s_object("", "web-1", "default", owners=["ReplicaSet"]),
                    k8s_object("", "standalone", "default"),
                ],
            },
            "/api/v1/namespaces": {
                "kind": "NamespaceList",
                "apiVersion": "v1",
                "items": [k8s_object("", "default")],
            },
            "/api/v1/secrets": {
                "kind": "SecretList",
                "apiVersion": "v1",
                "items": [
                    k8s_object(
                        "",
                        "default-token-abcde",
                        "default",
                        annotations={SERVICE_ACCOUNT_UID_ANNOTATION: "42"},
                    ),
                    k8s_object("", "db-password", "default"),
                ],
            },
            "/api/v1/services": {
                "kind": "ServiceList",
                "apiVersion": "v1",
                "items": [
                    k8s_object(
                        "", "glusterfs-dynamic-claim", "default",
                        labels={PROVISIONED_FOR_PVC_LABEL: "claim"},
                    ),
                    k8s_object("", "web", "default", labels={"app": "web"}),
                ],
            },
            "/apis/apps/v1/deployments": {
                "kind": "DeploymentList",
                "apiVersion": "apps/v1",
                "items": [k8s_object("", "web", "default")],
            },
            "/apis/apps/v1/replicasets": {
                "kind": "ReplicaSetList",
                "apiVersion": "apps/v1",
                "items": [k8s_object("", "web-5d4f", "default", owners=["Deployment"])],
            },
            "/apis/batch/v1/jobs": ApiException(status=405, reason="Method Not Allowed"),
        }
    )
    return fake_api


def run_scan(k8s_client, tmp_path, version="v2.16.1", **config):
    version_source = Mock()
    version_source.version.return_value = version
    service = ScannerService(
        k8s_client, ScanConfig(output_dir=tmp_path, **config), version_source=version_source
    )
    return service.run()


class TestScannerService:
    def test_full_scan(self, cluster_objects, k8s_client, tmp_path):
        """Test a full scan writes files and counts suppressions."""
        summary = run_scan(k8s_client, tmp_path, label_selector="release=myapp,tier=web")

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "caps.json",
            "scanned-deployment-default-web.yaml",
            "scanned-namespace--default.yaml",
            "scanned-pod-default-standalone.yaml",
            "scanned-secret-default-db-password.yaml",
            "scanned-service-default-web.yaml",
        ]
        assert summary.resource_types == 8
        assert summary.tolerated_types == ["jobs"]
        assert summary.suppressed == {
            SkipReason.OWNED: 2,
            SkipReason.SERVICE_ACCOUNT_TOKEN: 1,
            SkipReason.PROVISIONED_SERVICE: 1,
        }
        assert summary.capabilities_file == "caps.json"

    def test_written_objects_carry_type_metadata(self, cluster_objects, k8s_client, tmp_path):
        """Test written objects carry kind and apiVersion."""
        run_scan(k8s_client, tmp_path)

        pod = yaml.safe_load((tmp_path / "scanned-pod-default-standalone.yaml").read_text())
        assert pod["kind"] == "Pod"
        assert pod["apiVersion"] == "v1"
        assert pod["metadata"] == {"name": "standalone", "namespace": "default"}

    def test_capabilities_file(self, cluster_objects, k8s_client, tmp_path):
        """Test the capability document contents."""
        run_scan(k8s_client, tmp_path, label_selector="release=myapp,tier=web")

        caps = json.loads((tmp_path / "caps.json").read_text())
        assert caps["releaseName"] == "myapp"
        assert caps["namespace"] == ""
        assert caps["capabilities"]["apiVersions"] == ["apps/v1", "batch/v1", "v1"]
        assert caps["capabilities"]["externalToolVersion"] == "v2.16.1"
        assert caps["capabilities"]["kubeVersion"]["gitVersion"] == "v1.28.3"

    def test_capabilities_without_tool(self, cluster_objects, k8s_client, tmp_path):
        """Test the capability document without a tool version."""
        run_scan(k8s_client, tmp_path, version=None)

        caps = json.loads((tmp_path / "caps.json").read_text())
        assert "externalToolVersion" not in caps["capabilities"]
        assert caps["releaseName"] == ""

    def test_cluster_wide_only(self, cluster_objects, k8s_client, tmp_path):
        """Test a cluster-wide-only scan."""
        summary = run_scan(k8s_client, tmp_path, cluster_wide_only=True)

        assert summary.written_files == ["scanned-namespace--default.yaml"]

    def test_namespace_scope(self, cluster_objects, k8s_client, tmp_path):
        """Test a scan limited to one namespace."""
        cluster_objects.routes["/api/v1/namespaces/default/pods"] = cluster_objects.routes[
            "/api/v1/pods"
        ]

        summary = run_scan(k8s_client, tmp_path, namespace="default")

        assert summary.written_files == ["scanned-pod-default-standalone.yaml"]
        caps = json.loads((tmp_path / "caps.json").read_text())
        assert caps["namespace"] == "default"

    def test_custom_ownership_table(self, cluster_objects, k8s_client, tmp_path):
        """Test an empty ownership table keeps owned objects."""
        summary = run_scan(k8s_client, tmp_path, owned_kinds_to_skip={})

        assert "scanned-pod-default-web-1.yaml" in summary.written_files
        assert "scanned-replicaset-default-web-5d4f.yaml" in summary.written_files

    def test_earlier_files_survive_abort(self, cluster_objects, k8s_client, tmp_path):
        """Test files written before an abort stay on disk."""
        cluster_objects.routes["/apis/batch/v1/cronjobs"] = ApiException(
            status=403, reason="Forbidden"
        )

        with pytest.raises(ScanError, match="listing cronjobs"):
            run_scan(k8s_client, tmp_path)

        assert (tmp_path / "scanned-pod-default-standalone.yaml").exists()
        assert (tmp_path / "scanned-deployment-default-web.yaml").exists()
        assert not (tmp_path / "caps.json").exists()

    def test_discovery_failure(self, fake_api, k8s_client, tmp_path):
        """Test discovery failure aborts the run."""
        fake_api.routes["/api"] = ApiException(status=401, reason="Unauthorized")

        with pytest.raises(DiscoveryError):
            run_scan(k8s_client, tmp_path)

    def test_server_version_failure_after_objects_written(
        self, cluster_objects, k8s_client, tmp_path
    ):
        """Test a capability failure after objects were written."""
        cluster_objects.routes["/version"] = ApiException(status=500, reason="boom")

        with pytest.raises(ScanError, match="server version"):
            run_scan(k8s_client, tmp_path)

        assert (tmp_path / "scanned-namespace--default.yaml").exists()
