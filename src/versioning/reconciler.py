"""Working-area version reconciliation.

Scans the packages checked out in a source tree, reads the parent version each
one declares in ``ups/product_deps`` and infers the single version the working
area should be set up for.

Packages whose name starts with the core-framework prefix (``lar``) are
mandatory: once one of them has been accepted, another mandatory package
asking for a different version aborts the reconciliation unless
inconsistencies are explicitly ignored, in which case the last one wins.
Optional packages disagreeing with an accepted mandatory version are reported
and otherwise ignored.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.models import Inconsistency, PackageDependency, VersionDecision
from versioning.product_deps import read_parent_version

logger = logging.getLogger(__name__)


def is_mandatory(package_name: str, prefix: str = Constants.MANDATORY_PREFIX) -> bool:
    """Return True if the package belongs to the core framework family."""
    return bool(prefix) and package_name.startswith(prefix)


def scan_source(source_dir: str, mandatory_prefix: str = Constants.MANDATORY_PREFIX) -> Tuple[List[PackageDependency], int]:
    """Collect the declared parent versions of the packages in a source tree.

    Only directories carrying a version-control marker and a readable
    dependency file are considered. Packages are visited in name order.

    Returns:
        A tuple (packages, errors) where errors counts the dependency files
        which could not be read.
    """
    packages: List[PackageDependency] = []
    errors = 0
    for name in sorted(os.listdir(source_dir)):
        package_dir = os.path.join(source_dir, name)
        if not os.path.isdir(package_dir):
            continue
        # .git is a file in worktrees and submodules
        if not os.path.exists(os.path.join(package_dir, Constants.VCS_MARKER)):
            continue
        deps_file = os.path.join(package_dir, Constants.PRODUCT_DEPS_FILE)
        if not os.path.isfile(deps_file):
            # no dependencies, no useful information
            continue
        try:
            parent_version = read_parent_version(deps_file)
        except OSError as e:
            logger.error("Can't read '%s': %s", deps_file, e)
            errors += 1
            continue
        if not parent_version:
            continue
        if is_debug_enabled(logger):
            logger.debug(
                "%s: %s", name, parent_version,
                extra=extra_context(event="parse", component="reconciler", target=name),
            )
        packages.append(PackageDependency(
            name=name,
            parent_version=parent_version,
            mandatory=is_mandatory(name, mandatory_prefix),
            path=package_dir,
        ))
    return packages, errors


def reconcile(packages: Iterable[PackageDependency], ignore_inconsistency: bool = False) -> VersionDecision:
    """Infer one version from the packages, in the order given."""
    decision = VersionDecision(version=None)
    has_mandatory = False
    for package in packages:
        decision.packages.append(package)
        if decision.version and package.parent_version != decision.version:
            inconsistency = Inconsistency(
                reference=decision.reference,
                reference_version=decision.version,
                package=package.name,
                package_version=package.parent_version,
            )
            decision.inconsistencies.append(inconsistency)
            logger.error(inconsistency.describe())
            if has_mandatory:
                if not package.mandatory:
                    continue
                if not ignore_inconsistency:
                    decision.version = None
                    decision.aborted = True
                    break
        decision.reference = package.name
        decision.version = package.parent_version
        if package.mandatory:
            has_mandatory = True

    if is_debug_enabled(logger):
        logger.debug(
            "Reconciliation finished",
            extra=extra_context(
                event="decision",
                component="reconciler",
                outcome="aborted" if decision.aborted else (decision.version or "none"),
                count=len(decision.packages),
            ),
        )
    return decision


def reconcile_version(
    source_dir: str,
    ignore_inconsistency: bool = False,
    mandatory_prefix: str = Constants.MANDATORY_PREFIX,
) -> VersionDecision:
    """Scan a source tree and reconcile the versions its packages declare."""
    packages, errors = scan_source(source_dir, mandatory_prefix)
    decision = reconcile(packages, ignore_inconsistency=ignore_inconsistency)
    decision.errors = errors
    return decision
