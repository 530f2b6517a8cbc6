"""Kubernetes interaction module."""

from .catalog import CatalogEntry, TypeCatalog
from .client import K8sClient, ResourceClient
from .registry import TypeRegistry
from .scanner import ResourceScanner

__all__ = [
    "CatalogEntry",
    "TypeCatalog",
    "K8sClient",
    "ResourceClient",
    "TypeRegistry",
    "ResourceScanner",
]
