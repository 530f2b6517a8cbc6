"""Helm client used as an optional source of the deployment tool version."""

import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from ..utils.logger import get_logger

logger = get_logger(__name__)


class VersionSource(ABC):
    """Somewhere an external tool version can be read from."""

    @abstractmethod
    def version(self) -> Optional[str]:
        """Get the version, or None when the source is unavailable."""
        pass


class HelmVersionSource(VersionSource):
    """Reads the server-side (Tiller) version through the helm CLI.

    Every command is tried plain first and then with ``--tls``. The version
    is only asked for once a listing succeeds, because ``helm version`` hangs
    when Tiller is missing.
    """

    LIVENESS_COMMANDS: Sequence[List[str]] = (["ls"], ["ls", "--tls"])
    VERSION_COMMANDS: Sequence[List[str]] = (
        ["version", "-s", "--template", "{{.Server.SemVer}}"],
        ["version", "--tls", "-s", "--template", "{{.Server.SemVer}}"],
    )

    def __init__(self, binary: str = "helm", timeout: Optional[float] = 30.0):
        self.binary = binary
        self.timeout = timeout

    def _execute(self, args: List[str]) -> Tuple[bool, str]:
        """Execute Helm command."""
        cmd = [self.binary] + args
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, timeout=self.timeout
            )
            return True, result.stdout
        except FileNotFoundError:
            return False, f"{self.binary} not found"
        except subprocess.CalledProcessError as e:
            return False, e.stderr
        except subprocess.TimeoutExpired:
            return False, f"{' '.join(cmd)} timed out"

    def _first_success(self, variants: Sequence[List[str]]) -> Optional[str]:
        """Run each variant until one succeeds and return its output."""
        for args in variants:
            success, output = self._execute(args)
            if success:
                return output
            logger.debug(f"{self.binary} {' '.join(args)} failed: {output.strip()}")
        return None

    def version(self) -> Optional[str]:
        if self._first_success(self.LIVENESS_COMMANDS) is None:
            logger.debug("Helm not available")
            return None

        output = self._first_success(self.VERSION_COMMANDS)
        if output is None:
            logger.warning("Could not read Tiller version")
            return None

        return output.strip() or None
