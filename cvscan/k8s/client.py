"""Kubernetes client wrapper."""

from typing import Any, Dict, List, Optional, Tuple

import kubernetes.client as k8s
import kubernetes.config
from kubernetes.config import ConfigException
from kubernetes.client.exceptions import ApiException

from ..errors import ScanError
from ..model.kubernetes import ResourceType
from ..utils.logger import get_logger
from .registry import TypeRegistry

logger = get_logger(__name__)


def split_group_version(group_version: str) -> Tuple[str, str]:
    """Split ``group/version`` into its parts; a bare version is the core group."""
    if not group_version or group_version.count("/") > 1:
        raise ValueError(f"unexpected group/version {group_version!r}")
    if "/" not in group_version:
        return "", group_version
    group, version = group_version.split("/")
    if not group or not version:
        raise ValueError(f"unexpected group/version {group_version!r}")
    return group, version


def describe_error(error: Exception) -> str:
    """Render an API or transport error on one line."""
    if isinstance(error, ApiException):
        return f"{error.status} {error.reason}"
    return str(error)


class K8sClient:
    """Wrapper around the Kubernetes API client for raw discovery and list calls."""

    def __init__(
        self,
        context: Optional[str] = None,
        kubeconfig: Optional[str] = None,
        api_client: Optional[k8s.ApiClient] = None,
    ):
        self.context = context
        self.kubeconfig = kubeconfig
        self.api_client = api_client or self._load_api_client()
        self._resource_clients: Dict[str, "ResourceClient"] = {}

    def _load_api_client(self) -> k8s.ApiClient:
        """Build an API client from kubeconfig, falling back to in-cluster config."""
        configuration = k8s.Configuration()
        try:
            kubernetes.config.load_kube_config(
                config_file=self.kubeconfig,
                context=self.context,
                client_configuration=configuration,
            )
            logger.debug("Loaded kubeconfig")
        except ConfigException as e:
            if self.kubeconfig or self.context:
                raise ScanError(f"loading kubeconfig: {e}") from e
            try:
                kubernetes.config.load_incluster_config(client_configuration=configuration)
            except ConfigException as incluster_error:
                raise ScanError(
                    f"no usable cluster configuration: {e}; {incluster_error}"
                ) from incluster_error
            logger.debug("Loaded in-cluster configuration")

        return k8s.ApiClient(configuration)

    def get(self, path: str, query_params: Optional[List[Tuple[str, str]]] = None) -> Any:
        """Issue a GET and return the decoded JSON body."""
        logger.debug(f"GET {path}")
        request = self.api_client.param_serialize(
            "GET",
            path,
            query_params=query_params or [],
            header_params={"Accept": "application/json"},
            auth_settings=["BearerToken"],
        )
        response = self.api_client.call_api(*request)
        response.read()
        # Non-2xx responses raise ApiException here
        return self.api_client.response_deserialize(response, {"200": "object"}).data

    def get_version(self) -> Dict[str, Any]:
        """Get the negotiated server version."""
        return self.get("/version")

    def get_core_versions(self) -> List[str]:
        """Get the versions served by the core group."""
        return list(self.get("/api").get("versions") or [])

    def get_api_groups(self) -> List[Dict[str, Any]]:
        """Get every named API group with its versions."""
        return list(self.get("/apis").get("groups") or [])

    def get_api_resources(self, group_version: str) -> List[Dict[str, Any]]:
        """Get the resource definitions served by one group/version."""
        group, _ = split_group_version(group_version)
        prefix = "/apis" if group else "/api"
        return list(self.get(f"{prefix}/{group_version}").get("resources") or [])

    def resource_client(self, group_version: str, registry: TypeRegistry) -> "ResourceClient":
        """Get the client for a group/version, creating it on first use."""
        if group_version not in self._resource_clients:
            group, version = split_group_version(group_version)
            self._resource_clients[group_version] = ResourceClient(self, group, version, registry)
        return self._resource_clients[group_version]


class ResourceClient:
    """Client bound to a single group/version."""

    def __init__(self, client: K8sClient, group: str, version: str, registry: TypeRegistry):
        self.client = client
        self.group = group
        self.version = version
        self.registry = registry

    @property
    def group_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def api_path(self) -> str:
        return "/apis" if self.group else "/api"

    def list(
        self, resource_type: ResourceType, namespace: str = "", label_selector: str = ""
    ) -> List[Dict[str, Any]]:
        """List every object of a resource type, with type metadata filled in."""
        path = f"{self.api_path}/{self.group_version}"
        if namespace:
            path += f"/namespaces/{namespace}"
        path += f"/{resource_type.name}"

        query_params = []
        if label_selector:
            query_params.append(("labelSelector", label_selector))

        data = self.client.get(path, query_params) or {}
        list_api_version = data.get("apiVersion") or self.group_version
        item_kind = (
            self.registry.item_kind(self.group_version, data.get("kind", ""))
            or resource_type.kind
        )

        items = []
        for item in data.get("items") or []:
            item.setdefault("apiVersion", list_api_version)
            item.setdefault("kind", item_kind)
            items.append(item)
        return items
