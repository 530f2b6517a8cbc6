"""Exceptions raised by a scan run."""


class ScanError(Exception):
    """A failure that aborts the whole scan."""


class DiscoveryError(ScanError):
    """The API server's group/version listing could not be fetched."""
