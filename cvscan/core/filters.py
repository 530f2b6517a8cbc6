"""Decides which scanned objects make it into the snapshot."""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..model.config import DEFAULT_OWNED_KINDS_TO_SKIP
from ..model.kubernetes import ScanItem
from ..model.report import SkipReason

SERVICE_ACCOUNT_UID_ANNOTATION = "kubernetes.io/service-account.uid"
PROVISIONED_FOR_PVC_LABEL = "gluster.kubernetes.io/provisioned-for-pvc"


def snapshot_file_name(item: ScanItem) -> str:
    """Get the file name an item is written to.

    Cluster-scoped objects have an empty namespace, which leaves a double
    dash in the name.
    """
    return f"scanned-{item.kind.lower()}-{item.namespace}-{item.name}.yaml"


class ScanFilter:
    """Suppresses objects that a controller regenerates or that are plumbing."""

    def __init__(self, owned_kinds_to_skip: Optional[Dict[str, Iterable[str]]] = None):
        if owned_kinds_to_skip is None:
            owned_kinds_to_skip = DEFAULT_OWNED_KINDS_TO_SKIP
        self.owned_kinds_to_skip = {
            kind: set(owners) for kind, owners in owned_kinds_to_skip.items()
        }

        # Checked in order, first match wins
        self.checks: List[Tuple[SkipReason, Callable[[ScanItem], bool]]] = [
            (SkipReason.OWNED, self._is_owned),
            (SkipReason.SERVICE_ACCOUNT_TOKEN, self._is_service_account_token),
            (SkipReason.PROVISIONED_SERVICE, self._is_provisioned_service),
        ]

    def should_skip(self, item: ScanItem) -> Optional[SkipReason]:
        """Get the reason an item is suppressed, or None to keep it."""
        for reason, check in self.checks:
            if check(item):
                return reason
        return None

    def _is_owned(self, item: ScanItem) -> bool:
        owners = self.owned_kinds_to_skip.get(item.kind)
        if not owners:
            return False
        return any(kind in owners for kind in item.owner_kinds)

    def _is_service_account_token(self, item: ScanItem) -> bool:
        return item.kind == "Secret" and bool(
            item.annotations.get(SERVICE_ACCOUNT_UID_ANNOTATION)
        )

    def _is_provisioned_service(self, item: ScanItem) -> bool:
        return item.kind == "Service" and bool(item.labels.get(PROVISIONED_FOR_PVC_LABEL))
