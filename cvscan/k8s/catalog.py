"""Dynamic discovery of every resource type the API server serves."""

from typing import Dict, Iterable, List, NamedTuple, Optional

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from ..errors import DiscoveryError
from ..model.config import DEFAULT_SKIP_RESOURCES
from ..model.kubernetes import ResourceType
from ..utils.logger import get_logger
from .client import K8sClient, ResourceClient, describe_error, split_group_version
from .registry import TypeRegistry

logger = get_logger(__name__)


class CatalogEntry(NamedTuple):
    """A resource type bound to the client for its group/version."""

    resource_type: ResourceType
    client: ResourceClient


class TypeCatalog:
    """Builds the name -> client mapping used to list the whole cluster."""

    def __init__(
        self,
        client: K8sClient,
        registry: TypeRegistry,
        skip_resources: Optional[Iterable[str]] = None,
    ):
        self.client = client
        self.registry = registry
        self.skip_resources = set(
            DEFAULT_SKIP_RESOURCES if skip_resources is None else skip_resources
        )

    def discover(self, cluster_wide_only: bool = False) -> Dict[str, CatalogEntry]:
        """Discover every listable resource type.

        Names are claimed first-seen: a plural name served by more than one
        group/version is bound to whichever is discovered first and the rest
        are dropped. Sub-resources and the permanent skip set never appear,
        and with ``cluster_wide_only`` namespaced types are left out.

        Raises:
            DiscoveryError: the top-level group/version listing failed.
        """
        group_versions = self._preferred_group_versions()
        self.registry.add_extension_schemas()

        claimed: Dict[str, str] = {}
        catalog: Dict[str, CatalogEntry] = {}

        for group_version in group_versions:
            try:
                group, version = split_group_version(group_version)
            except ValueError as e:
                logger.error(f"Error parsing group/version {group_version!r}: {e}")
                continue

            try:
                resources = self.client.get_api_resources(group_version)
            except (ApiException, HTTPError) as e:
                logger.warning(f"Failed to get server API {group_version}: {describe_error(e)}")
                continue

            resource_client = self.client.resource_client(group_version, self.registry)

            for resource in resources:
                name = resource.get("name", "")
                kind = resource.get("kind", "")
                namespaced = bool(resource.get("namespaced", False))

                if "/" in name or name in self.skip_resources:
                    continue

                if name in claimed:
                    logger.debug(
                        f"Dropping {name} from {group_version}, already claimed by {claimed[name]}"
                    )
                    continue

                if cluster_wide_only and namespaced:
                    continue

                claimed[name] = group_version
                self.registry.register(group_version, kind)
                catalog[name] = CatalogEntry(
                    resource_type=ResourceType(
                        name=name,
                        kind=kind,
                        namespaced=namespaced,
                        group=group,
                        version=version,
                    ),
                    client=resource_client,
                )

            kinds = sorted(self.registry.kinds_for(group_version))
            logger.debug(f"{group_version} serves kinds: {', '.join(kinds)}")

        logger.info(f"Discovered {len(catalog)} resource types")
        return catalog

    def _preferred_group_versions(self) -> List[str]:
        """List group/versions with each group's preferred version first."""
        try:
            group_versions = self.client.get_core_versions()
            groups = self.client.get_api_groups()
        except (ApiException, HTTPError) as e:
            raise DiscoveryError(f"fetching server API resources: {describe_error(e)}") from e

        for group in groups:
            preferred = (group.get("preferredVersion") or {}).get("groupVersion")
            versions = [v.get("groupVersion") for v in group.get("versions") or []]
            if preferred:
                group_versions.append(preferred)
            group_versions.extend(v for v in versions if v and v != preferred)

        return group_versions
