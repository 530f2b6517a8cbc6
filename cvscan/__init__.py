"""Point-in-time snapshot of every object in a Kubernetes cluster."""

__version__ = "0.1.0"
