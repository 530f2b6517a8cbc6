"""Registry of the kinds each group/version is known to serve."""

from collections import defaultdict
from typing import Dict, Set

from ..utils.logger import get_logger

logger = get_logger(__name__)

# Kinds from the aggregation and extension API groups, which are not part of
# the core type set but show up in every cluster.
EXTENSION_SCHEMAS: Dict[str, Set[str]] = {
    "apiregistration.k8s.io/v1": {"APIService", "APIServiceList"},
    "apiregistration.k8s.io/v1beta1": {"APIService", "APIServiceList"},
    "apiextensions.k8s.io/v1": {"CustomResourceDefinition", "CustomResourceDefinitionList"},
    "apiextensions.k8s.io/v1beta1": {
        "CustomResourceDefinition",
        "CustomResourceDefinitionList",
    },
}


class TypeRegistry:
    """Maps group/version strings to the kinds decoded for them.

    Built once per scan and handed to the catalog, which registers every kind
    it discovers. Resource clients consult it when a list response leaves the
    type metadata off its items.
    """

    def __init__(self):
        self._kinds: Dict[str, Set[str]] = defaultdict(set)
        self._extensions_added = False

    def add_extension_schemas(self) -> None:
        """Register the aggregation and extension API kinds, once."""
        if self._extensions_added:
            return
        for group_version, kinds in EXTENSION_SCHEMAS.items():
            for kind in kinds:
                self.register(group_version, kind)
        self._extensions_added = True
        logger.debug("Registered extension schemas")

    def register(self, group_version: str, kind: str) -> None:
        """Record that a group/version serves a kind."""
        self._kinds[group_version].add(kind)

    def is_registered(self, group_version: str, kind: str) -> bool:
        """Check whether a kind is known for a group/version."""
        return kind in self._kinds.get(group_version, ())

    def kinds_for(self, group_version: str) -> Set[str]:
        """Get all kinds known for a group/version."""
        return set(self._kinds.get(group_version, ()))

    def item_kind(self, group_version: str, list_kind: str) -> str:
        """Resolve the item kind for a list kind such as ``PodList``.

        Returns an empty string when the list kind does not name a registered
        item kind.
        """
        if not list_kind.endswith("List"):
            return ""
        kind = list_kind[: -len("List")]
        return kind if self.is_registered(group_version, kind) else ""
