"""CLI entry point for ``larscripts update-area``.

Updates the MRB working area to allow for a new version: detects the target
version from the checked out packages (unless given), creates the matching
local products area and points the ``localProducts`` link to it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional

from config import Settings, load_settings
from constants import Constants, ExitCodes
from environment import Environment
from exceptions import ConfigurationError, ExternalToolError, InconsistencyError, LarScriptsError
from toolchain.base import Toolchain
from toolchain.shell import ShellToolchain
from versioning.qualifiers import sort_qualifiers
from versioning.reconciler import reconcile_version
from workarea.local_products import LocalProductsResult, create_local_products

logger = logging.getLogger(__name__)

REBUILD_ADVICE = """NOTA BENE: it is suggested that the working area is rebuilt anew:
mrb zapBuild
source mrb setEnv
mrb install"""


def detect_version(env: Environment, settings: Settings, ignore_inconsistency: bool = False) -> Optional[str]:
    """Infer the target version from the packages in ``MRB_SOURCE``.

    Raises:
        InconsistencyError: If core packages disagree and that is not ignored.
        ConfigurationError: If some dependency files could not be read.
    """
    source_dir = env.get(Constants.ENV_MRB_SOURCE)
    if not source_dir or not os.path.isdir(source_dir):
        logger.error("No source directory available, can't autodetect the version.")
        return None
    decision = reconcile_version(
        source_dir,
        ignore_inconsistency=ignore_inconsistency,
        mandatory_prefix=settings.mandatory_prefix,
    )
    if decision.errors:
        raise ConfigurationError(
            f"{decision.errors} dependency file(s) under '{source_dir}' could not be read;"
            " pass the version explicitly or fix the permissions."
        )
    if decision.aborted:
        last = decision.inconsistencies[-1]
        raise InconsistencyError(
            f"Core packages ask for different versions ({last.reference}: {last.reference_version},"
            f" {last.package}: {last.package_version}); use --ignoreinconsistency to override.",
            reference=last.reference,
            package=last.package,
        )
    return decision.version


def update_area(
    env: Environment,
    toolchain: Toolchain,
    settings: Settings,
    version: Optional[str] = None,
    qualifiers: Optional[str] = None,
    force: bool = False,
    ignore_inconsistency: bool = False,
) -> LocalProductsResult:
    """Prepare the working area described by ``env`` for a version.

    Raises:
        ConfigurationError: If MRB is not configured or no version can be determined.
        InconsistencyError: If core packages disagree on the version.
        ExternalToolError: If the build tool fails creating the local products area.
    """
    qualifiers = sort_qualifiers(qualifiers or env.get(Constants.ENV_MRB_QUALS, ""))

    work_area = env.get(Constants.ENV_MRB_TOP)
    if not work_area:
        raise ConfigurationError("mrb is not configured!")
    if not os.path.isdir(work_area):
        raise ConfigurationError(f"The working area '{work_area}' does not exist.")
    logger.info("Working area: '%s'", work_area)

    if not version:
        version = detect_version(env, settings, ignore_inconsistency)
    if not version:
        raise ConfigurationError("I don't know which version to set up!")

    project = env.get(Constants.ENV_MRB_PROJECT) or settings.core_package
    logger.info("Setting up the working area for %s %s (%s)", project, version, qualifiers)

    result = create_local_products(work_area, project, version, qualifiers, toolchain, force=force)
    if result.created and os.path.basename(env.get(Constants.ENV_MRB_BUILD, "").rstrip("/")) == "build":
        logger.info(REBUILD_ADVICE)
    return result


def run_update_area(args: Any, env: Optional[Environment] = None, toolchain: Optional[Toolchain] = None) -> int:
    """Entry point for the update-area command.

    Returns:
        The exit code.
    """
    if getattr(args, "SHOW_VERSION", False):
        print(f"update-area version {Constants.SCRIPT_VERSION}")
        return ExitCodes.SUCCESS.value

    env = env if env is not None else Environment()
    try:
        settings = load_settings(getattr(args, "CONFIG", None))
        if toolchain is None:
            toolchain = ShellToolchain(env, cwd=env.get(Constants.ENV_MRB_TOP) or None)
        result = update_area(
            env,
            toolchain,
            settings,
            version=getattr(args, "VERSION", None),
            qualifiers=getattr(args, "QUALIFIERS", None),
            force=getattr(args, "FORCE", False),
            ignore_inconsistency=getattr(args, "IGNORE_INCONSISTENCY", False),
        )
    except ExternalToolError as e:
        # a negative code is the signal which killed the tool
        exit_code = 128 - e.returncode if e.returncode < 0 else e.returncode
        logger.error("FATAL ERROR (%d): %s", exit_code, e)
        return exit_code
    except (ConfigurationError, InconsistencyError) as e:
        logger.error("FATAL ERROR (%d): %s", ExitCodes.FAILURE.value, e)
        return ExitCodes.FAILURE.value
    except LarScriptsError as e:
        logger.error("%s", e)
        return ExitCodes.FAILURE.value

    if getattr(args, "EMIT_SOURCE", False):
        sys.stdout.write(f"source '{os.path.join(result.path, Constants.LOCAL_PRODUCTS_SETUP)}'\n")
    return ExitCodes.SUCCESS.value
