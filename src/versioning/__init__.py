"""Qualifier normalization and working-area version reconciliation."""

from .qualifiers import sort_qualifiers, qualifiers_to_path
from .models import PackageDependency, VersionDecision
from .product_deps import read_parent_version
from .reconciler import reconcile_version, scan_source

__all__ = [
    "sort_qualifiers",
    "qualifiers_to_path",
    "PackageDependency",
    "VersionDecision",
    "read_parent_version",
    "reconcile_version",
    "scan_source",
]
