"""Handlers of the setup modes.

Each handler takes a ``ModeRequest`` and a ``ModeContext`` and returns a
``ModeResult``. Failures of individual steps are counted and do not stop the
remaining ones.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, List, Optional, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from dispatch.models import Mode, ModeContext, ModeRequest, ModeResult, parse_mode
from exceptions import ConfigurationError
from versioning.qualifiers import sort_qualifiers
from workarea.local_products import find_local_products_script

logger = logging.getLogger(__name__)

Handler = Callable[[ModeRequest, ModeContext], ModeResult]


def parse_codename(entry: str, version: str = "", qualifiers: str = "") -> Tuple[str, str, str]:
    """Parse ``name[@version[@qualifiers]]``; missing parts take the defaults.

    >>> parse_codename("icaruscode@@e20:prof", "v09_00_00")
    ('icaruscode', 'v09_00_00', 'e20:prof')
    """
    parts = entry.split("@", 2)
    name = parts[0]
    entry_version = parts[1] if len(parts) > 1 and parts[1] else version
    entry_qualifiers = parts[2] if len(parts) > 2 and parts[2] else qualifiers
    return name, entry_version, sort_qualifiers(entry_qualifiers)


def resolve_codenames(request: ModeRequest, context: ModeContext) -> List[str]:
    """Codenames to set up: the requested package, the experiment's, or the core one."""
    if request.package:
        if request.package_version:
            return [f"{request.package}@{request.package_version}"]
        return [request.package]
    experiment = context.settings.experiment(request.experiment)
    if experiment and experiment.codenames:
        return list(experiment.codenames)
    return [context.settings.core_package]


def _request_qualifiers(request: ModeRequest, context: ModeContext) -> str:
    return sort_qualifiers(request.qualifiers or context.env.get(Constants.ENV_MRB_QUALS, ""))


def _ensure_build_tool(context: ModeContext, result: ModeResult) -> None:
    if context.env.get(Constants.ENV_MRB_DIR):
        return
    try:
        tool_result = context.toolchain.setup(Constants.BUILD_TOOL)
    except ConfigurationError as e:
        result.fail(f"Can't set up {Constants.BUILD_TOOL}: {e}")
        return
    if not tool_result.ok:
        result.fail(f"Setting up {Constants.BUILD_TOOL} failed (exit code {tool_result.returncode})")


def _find_ups_setups(context: ModeContext) -> Optional[str]:
    for products_dir in context.env.get_path(Constants.ENV_PRODUCTS):
        candidate = os.path.join(products_dir, Constants.UPS_SETUPS_FILE)
        if os.path.isfile(candidate):
            return candidate
    return None


def _setup_local(context: ModeContext, result: ModeResult) -> None:
    env = context.env
    settings = context.settings
    if settings.local_products_dirs:
        env.append_path(Constants.ENV_PRODUCTS, *settings.local_products_dirs)
    if settings.override_products_dirs:
        env.prepend_path(Constants.ENV_PRODUCTS, *settings.override_products_dirs)
    env.dedupe_path(Constants.ENV_PRODUCTS)

    setups = _find_ups_setups(context)
    if setups is None:
        result.fail("No UPS setup script found in any of the PRODUCTS directories.")
        return
    result.note(f"Setting up UPS from '{setups}'")
    tool_result = context.toolchain.bootstrap(setups)
    if not tool_result.ok:
        result.fail(f"Setting up UPS from '{setups}' failed (exit code {tool_result.returncode})")
        return
    _ensure_build_tool(context, result)


def setup_base(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Bootstrap the experiment environment, or the local one as fallback."""
    result = ModeResult(request.mode)
    experiment = context.settings.experiment(request.experiment)
    script = experiment.bootstrap if experiment else None
    if script and os.path.isfile(script) and os.access(script, os.R_OK):
        result.note(f"Setting up {experiment.name} from '{script}'")
        tool_result = context.toolchain.bootstrap(script)
        if not tool_result.ok:
            result.fail(f"Setup script '{script}' failed (exit code {tool_result.returncode})")
            return result
        _ensure_build_tool(context, result)
        return result

    if request.experiment:
        logger.info("No setup script available for experiment '%s': using the local setup.", request.experiment)
    _setup_local(context, result)
    return result


def print_local_products_script(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Compute the setup script of the local products area for the request."""
    result = ModeResult(request.mode)
    base_dir = context.env.get(Constants.ENV_MRB_TOP) or context.cwd
    project = context.env.get(Constants.ENV_MRB_PROJECT) or context.settings.core_package
    path, found = find_local_products_script(
        base_dir, project, request.version, _request_qualifiers(request, context),
    )
    if not found:
        logger.debug("Local products setup script '%s' does not exist (yet)", path)
    result.output = path
    return result


def setup_local_products(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Source the local products setup script."""
    lookup = print_local_products_script(request, context)
    result = ModeResult(request.mode, output=lookup.output)
    script = lookup.output
    if not script or not os.path.isfile(script):
        result.fail(f"Local products setup script '{script}' not found.")
        return result
    result.note(f"Setting up local products from '{script}'")
    tool_result = context.toolchain.bootstrap(script)
    if not tool_result.ok:
        result.fail(f"Local products setup '{script}' failed (exit code {tool_result.returncode})")
    context.env.dedupe_path(Constants.ENV_PRODUCTS)
    return result


def setup_local_products_packages(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Let the build tool set up the products of the local products area."""
    result = ModeResult(request.mode)
    tool_result = context.toolchain.build_tool(["slp"], source=True)
    if not tool_result.ok:
        result.fail(f"Setup of local products failed (exit code {tool_result.returncode})")
    return result


def setup_larsoft(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Set up each codename with the package manager."""
    result = ModeResult(request.mode)
    qualifiers = _request_qualifiers(request, context)
    for entry in resolve_codenames(request, context):
        name, version, quals = parse_codename(entry, request.version, qualifiers)
        result.note(f"Setting up {name} {version or '(current)'} ({quals})")
        try:
            tool_result = context.toolchain.setup(name, version, quals)
        except ConfigurationError as e:
            result.fail(f"Can't set up {name}: {e}")
            continue
        if not tool_result.ok:
            result.fail(f"Setting up {name} {version} ({quals}) failed (exit code {tool_result.returncode})")
    if result.failures:
        logger.error("%d setup(s) failed.", result.failures)
    return result


def setup_build(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Initialize the build environment with the installed build tool version."""
    result = ModeResult(request.mode)
    mrb_version = context.env.get(Constants.ENV_MRB_VERSION)
    if not mrb_version:
        result.fail(f"{Constants.BUILD_TOOL} is not set up ({Constants.ENV_MRB_VERSION} is not defined).")
        return result

    if mrb_version.startswith(Constants.BUILD_TOOL_OLD_STYLE_PREFIX):
        result.note(f"Setting up the build environment ({Constants.BUILD_TOOL} {mrb_version}, old style)")
        tool_result = context.toolchain.build_tool(["setEnv"], source=True)
    else:
        mrb_dir = context.env.get(Constants.ENV_MRB_DIR)
        if not mrb_dir:
            result.fail(f"{Constants.BUILD_TOOL} is not set up ({Constants.ENV_MRB_DIR} is not defined).")
            return result
        result.note(f"Setting up the build environment ({Constants.BUILD_TOOL} {mrb_version})")
        tool_result = context.toolchain.bootstrap(os.path.join(mrb_dir, Constants.BUILD_TOOL_SETENV_SCRIPT))
    if not tool_result.ok:
        result.fail(f"Setting up the build environment failed (exit code {tool_result.returncode})")
    return result


def setup_artenv(request: ModeRequest, context: ModeContext) -> ModeResult:
    """Add the FHiCL and data directories of the working area to the search paths."""
    result = ModeResult(request.mode)
    env = context.env
    roots = [r for r in (env.get(Constants.ENV_MRB_TOP), context.cwd) if r]
    layout = (
        (Constants.ENV_FHICL_FILE_PATH, context.settings.fcl_dirs),
        (Constants.ENV_FW_SEARCH_PATH, context.settings.data_dirs),
    )
    for variable, subdirs in layout:
        found = [
            os.path.join(root, subdir)
            for root in roots for subdir in subdirs
            if os.path.isdir(os.path.join(root, subdir))
        ]
        if found:
            env.append_path(variable, *found)
            env.dedupe_path(variable)
            logger.debug("%s: added %s", variable, ", ".join(found))
    return result


MODE_HANDLERS: Dict[Mode, Handler] = {
    Mode.BASE: setup_base,
    Mode.PRINT_LOCAL_PRODUCTS_SCRIPT: print_local_products_script,
    Mode.LOCAL_PRODUCTS: setup_local_products,
    Mode.LOCAL_PRODUCTS_SETUP: setup_local_products_packages,
    Mode.LARSOFT: setup_larsoft,
    Mode.BUILD: setup_build,
    Mode.ARTENV: setup_artenv,
}


def dispatch(mode, context: ModeContext, *args: str) -> ModeResult:
    """Run a setup mode.

    Args:
        mode: A ``Mode`` or its keyword.
        context: Environment, toolchain and settings to work with.
        *args: version, qualifiers, experiment, package, package_version.

    Raises:
        UnsupportedModeError: If the mode keyword is unknown; nothing is run.
    """
    if not isinstance(mode, Mode):
        mode = parse_mode(mode)
    request = ModeRequest(mode, *args)
    if is_debug_enabled(logger):
        logger.debug(
            "Dispatching mode",
            extra=extra_context(event="function_entry", component="dispatch", action=mode.value),
        )
    result = MODE_HANDLERS[mode](request, context)
    if is_debug_enabled(logger):
        logger.debug(
            "Mode finished",
            extra=extra_context(
                event="function_exit",
                component="dispatch",
                action=mode.value,
                outcome="success" if result.success else "failure",
                count=result.failures,
            ),
        )
    return result
