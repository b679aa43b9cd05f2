"""Local products directories of an MRB working area.

A working area holds one ``localProducts_<project>_<version>_<qualifiers>``
directory per version it has been set up for, and a ``localProducts`` symbolic
link to the most recently created one.
"""

from __future__ import annotations

import glob
import logging
import os
import shutil
from dataclasses import dataclass
from typing import Optional, Tuple

from constants import Constants
from exceptions import ExternalToolError
from toolchain.base import Toolchain
from versioning.qualifiers import qualifiers_to_path

logger = logging.getLogger(__name__)


@dataclass
class LocalProductsResult:
    """What happened to the local products area."""
    path: str
    created: bool = False
    overwritten: bool = False
    link_updated: bool = False


def local_products_dir_name(project: str, version: str, qualifiers: Optional[str]) -> str:
    """Name of the local products directory for a project/version/qualifiers triple."""
    return f"{Constants.LOCAL_PRODUCTS_PREFIX}_{project}_{version}_{qualifiers_to_path(qualifiers)}"


def find_local_products_script(
    base_dir: str,
    project: str,
    version: Optional[str],
    qualifiers: Optional[str],
) -> Tuple[str, bool]:
    """Locate the setup script of the local products area.

    Search order: the exact ``localProducts_<project>_<version>_<qualifiers>``
    directory, then ``localProd``, then the ``localProducts`` link, then the
    last (by name) of the ``localProducts_<project>_*`` directories.

    Returns:
        A tuple (path, found). When nothing exists, path is the expected
        location of the exact match and found is False.
    """
    setup = Constants.LOCAL_PRODUCTS_SETUP
    expected = os.path.join(base_dir, local_products_dir_name(project, version or "", qualifiers), setup)
    candidates = [
        expected,
        os.path.join(base_dir, Constants.LOCAL_PRODUCTS_ALT, setup),
        os.path.join(base_dir, Constants.LOCAL_PRODUCTS_LINK, setup),
    ]
    pattern = os.path.join(
        glob.escape(base_dir), f"{Constants.LOCAL_PRODUCTS_PREFIX}_{glob.escape(project)}_*", setup,
    )
    matches = sorted(glob.glob(pattern))
    if matches:
        candidates.append(matches[-1])
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate, True
    return expected, False


def update_link(work_area: str, dir_name: str) -> bool:
    """Point the ``localProducts`` link of the working area to ``dir_name``.

    A ``localProducts`` entry which is not a symbolic link is left alone.

    Returns:
        True if the link now points to ``dir_name``.
    """
    link = os.path.join(work_area, Constants.LOCAL_PRODUCTS_LINK)
    if os.path.lexists(link) and not os.path.islink(link):
        logger.error("Can't update %s since it does exist and it's not a link", Constants.LOCAL_PRODUCTS_LINK)
        return False
    if os.path.islink(link):
        os.unlink(link)
    os.symlink(dir_name, link)
    logger.info("Updated '%s' link.", Constants.LOCAL_PRODUCTS_LINK)
    return True


def create_local_products(
    work_area: str,
    project: str,
    version: str,
    qualifiers: Optional[str],
    toolchain: Toolchain,
    force: bool = False,
) -> LocalProductsResult:
    """Create the local products area for a version, unless it exists already.

    Args:
        work_area: The MRB working area (``MRB_TOP``).
        project: The MRB project name.
        version: Target version.
        qualifiers: Canonical qualifier string.
        toolchain: Runs ``mrb newDev``.
        force: Remove an existing directory and create it again.

    Raises:
        ExternalToolError: If the build tool fails to create the area.
    """
    dir_name = local_products_dir_name(project, version, qualifiers)
    path = os.path.join(work_area, dir_name)
    result = LocalProductsResult(path=path)

    if os.path.isdir(path) and force:
        logger.warning("Local product directory '%s' already exists: OVERWRITING IT!", dir_name)
        shutil.rmtree(path)
        result.overwritten = True
    if os.path.isdir(path):
        logger.info("Local product directory '%s' already exists. Everything is good.", dir_name)
        return result

    tool_result = toolchain.build_tool(["newDev", "-p", "-v", version, "-q", qualifiers or ""])
    if not tool_result.ok:
        raise ExternalToolError("Creation of the local products area failed!", tool_result.returncode)
    result.created = True
    result.link_updated = update_link(work_area, dir_name)
    return result
