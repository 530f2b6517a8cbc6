"""Kubernetes resource scanner."""

from typing import Dict, Iterator, List

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from ..errors import ScanError
from ..model.config import DEFAULT_MULTICLUSTER_GROUP_SUFFIX
from ..model.kubernetes import ScanItem
from ..utils.logger import get_logger
from .catalog import CatalogEntry
from .client import describe_error

logger = get_logger(__name__)

NOT_FOUND = 404
METHOD_NOT_SUPPORTED = 405
BAD_REQUEST = 400
SERVICE_UNAVAILABLE = 503


class ResourceScanner:
    """Lists every catalogued resource type, one type at a time."""

    def __init__(
        self,
        catalog: Dict[str, CatalogEntry],
        namespace: str = "",
        label_selector: str = "",
        multicluster_group_suffix: str = DEFAULT_MULTICLUSTER_GROUP_SUFFIX,
    ):
        self.catalog = catalog
        self.namespace = namespace
        self.label_selector = label_selector
        self.multicluster_group_suffix = multicluster_group_suffix
        self.tolerated: List[str] = []

    def scan(self) -> Iterator[ScanItem]:
        """Yield every object of every catalogued type.

        Items of one type are yielded before the next type is listed, so a
        caller writing them as they arrive keeps everything written before a
        later failure.

        Raises:
            ScanError: a list call failed with an error outside the tolerated set.
        """
        logger.info(f"Scanning {len(self.catalog)} resource types")

        for name, entry in self.catalog.items():
            resource_type = entry.resource_type

            # A namespace scope has no path for cluster-scoped types.
            if self.namespace and not resource_type.namespaced:
                logger.debug(f"Skipping cluster-scoped {name} in namespace scan")
                continue

            try:
                items = entry.client.list(
                    resource_type,
                    namespace=self.namespace,
                    label_selector=self.label_selector,
                )
            except ApiException as e:
                if not self._is_tolerated(e, resource_type.group):
                    raise ScanError(f"listing {name}: {describe_error(e)}") from e
                logger.warning(f"Ignoring {name}: {describe_error(e)}")
                self.tolerated.append(name)
                continue
            except HTTPError as e:
                raise ScanError(f"listing {name}: {e}") from e

            logger.debug(f"Found {len(items)} {name}")
            for item in items:
                yield ScanItem.from_object(item)

    def _is_tolerated(self, error: ApiException, group: str) -> bool:
        """Check whether a list error just means the type yields nothing."""
        if error.status in (NOT_FOUND, METHOD_NOT_SUPPORTED):
            return True
        # Multi-cluster manager groups require an extra credential in the request.
        return error.status in (BAD_REQUEST, SERVICE_UNAVAILABLE) and group.endswith(
            self.multicluster_group_suffix
        )
