"""Test configuration and fixtures."""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

import pytest
import kubernetes.client as k8s
from kubernetes.client.exceptions import ApiException
from urllib3 import HTTPResponse

from cvscan.k8s.client import K8sClient


class FakeApiServer:
    """Serves canned paths in place of the urllib3 pool behind a real ``ApiClient``."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[Tuple[str, List[Tuple[str, str]]]] = []

    def request(self, method: str, url: str, **kwargs) -> HTTPResponse:
        """Answer one HTTP request from the routes.

        Paths without a route answer with an empty list. An ``ApiException`` route
        becomes an error response with its status; any other exception is raised.
        """
        assert method == "GET"
        parts = urlsplit(url)
        self.calls.append((parts.path, parse_qsl(parts.query)))
        response = self.routes.get(parts.path, {"kind": "List", "items": []})
        if isinstance(response, ApiException):
            body = {"kind": "Status", "code": response.status, "message": response.reason}
            return json_response(body, response.status, response.reason)
        if isinstance(response, Exception):
            raise response
        return json_response(response)

    @property
    def paths(self) -> List[str]:
        """Paths requested so far, in order."""
        return [path for path, _ in self.calls]


def json_response(body: Any, status: int = 200, reason: str = "OK") -> HTTPResponse:
    """Build an unread urllib3 response carrying a JSON body."""
    return HTTPResponse(
        body=json.dumps(body).encode("utf-8"),
        status=status,
        reason=reason,
        headers={"Content-Type": "application/json"},
        preload_content=False,
    )


def api_resource(name: str, kind: str, namespaced: bool = True) -> Dict[str, Any]:
    """Build one entry of an APIResourceList."""
    return {"name": name, "kind": kind, "namespaced": namespaced, "verbs": ["get", "list"]}


def api_group(name: str, *versions: str) -> Dict[str, Any]:
    """Build an APIGroup whose first version is the preferred one."""
    group_versions = [{"groupVersion": f"{name}/{v}", "version": v} for v in versions]
    return {
        "name": name,
        "versions": group_versions,
        "preferredVersion": group_versions[0],
    }


def k8s_object(
    kind: str,
    name: str,
    namespace: Optional[str] = None,
    owners: Optional[List[str]] = None,
    labels: Optional[Dict[str, str]] = None,
    annotations: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build a list item; an empty kind leaves the type metadata off, as list responses do."""
    metadata: Dict[str, Any] = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    if owners:
        metadata["ownerReferences"] = [
            {"apiVersion": "apps/v1", "kind": owner, "name": f"{name}-owner", "uid": "1"}
            for owner in owners
        ]
    if labels:
        metadata["labels"] = labels
    if annotations:
        metadata["annotations"] = annotations
    obj: Dict[str, Any] = {"metadata": metadata}
    if kind:
        obj["kind"] = kind
    return obj


@pytest.fixture
def discovery_routes() -> Dict[str, Any]:
    """Discovery documents for a small cluster with core, apps and batch groups."""
    return {
        "/version": {"major": "1", "minor": "28", "gitVersion": "v1.28.3", "platform": "linux/amd64"},
        "/api": {"kind": "APIVersions", "versions": ["v1"]},
        "/apis": {
            "kind": "APIGroupList",
            "groups": [api_group("apps", "v1"), api_group("batch", "v1")],
        },
        "/api/v1": {
            "kind": "APIResourceList",
            "groupVersion": "v1",
            "resources": [
                api_resource("pods", "Pod"),
                api_resource("pods/log", "Pod"),
                api_resource("namespaces", "Namespace", namespaced=False),
                api_resource("secrets", "Secret"),
                api_resource("services", "Service"),
                api_resource("events", "Event"),
            ],
        },
        "/apis/apps/v1": {
            "kind": "APIResourceList",
            "groupVersion": "apps/v1",
            "resources": [
                api_resource("deployments", "Deployment"),
                api_resource("deployments/scale", "Scale"),
                api_resource("replicasets", "ReplicaSet"),
                api_resource("controllerrevisions", "ControllerRevision"),
            ],
        },
        "/apis/batch/v1": {
            "kind": "APIResourceList",
            "groupVersion": "batch/v1",
            "resources": [
                api_resource("jobs", "Job"),
                api_resource("cronjobs", "CronJob"),
            ],
        },
    }


@pytest.fixture
def fake_api(discovery_routes):
    """Fake API server preloaded with the discovery documents."""
    return FakeApiServer(discovery_routes)


@pytest.fixture
def k8s_client(fake_api, monkeypatch):
    """K8sClient over a real ApiClient whose connection pool is the fake API server."""
    api_client = k8s.ApiClient(k8s.Configuration())
    monkeypatch.setattr(api_client.rest_client.pool_manager, "request", fake_api.request)
    return K8sClient(api_client=api_client)
