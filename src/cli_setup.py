"""CLI entry point for ``larscripts setup``.

Runs one setup step against a copy of the current environment and prints
the resulting changes as shell code, to be applied with
``eval "$(larscripts setup MODE ...)"``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from config import load_settings
from constants import ExitCodes
from dispatch.models import Mode, ModeContext
from dispatch.modes import dispatch
from environment import Environment
from exceptions import ConfigurationError, UnsupportedModeError
from toolchain.base import Toolchain
from toolchain.shell import ShellToolchain

logger = logging.getLogger(__name__)

_MAX_EXIT_CODE = 125


def run_setup(args: Any, env: Optional[Environment] = None, toolchain: Optional[Toolchain] = None) -> int:
    """Entry point for the setup command.

    Returns:
        The exit code: 0 on success, the number of failures otherwise.
    """
    env = env if env is not None else Environment()
    shell = getattr(args, "SHELL", "bash") or "bash"
    try:
        settings = load_settings(getattr(args, "CONFIG", None))
    except ConfigurationError as e:
        logger.error("%s", e)
        return ExitCodes.FAILURE.value
    if toolchain is None:
        toolchain = ShellToolchain(env)
    context = ModeContext(env=env, toolchain=toolchain, settings=settings)

    positionals = [
        getattr(args, name, "") or ""
        for name in ("VERSION", "QUALIFIERS", "EXPERIMENT", "PACKAGE", "PACKAGE_VERSION")
    ]
    try:
        result = dispatch(args.MODE, context, *positionals)
    except UnsupportedModeError as e:
        logger.error("%s (supported: %s)", e, ", ".join(m.value for m in Mode))
        return ExitCodes.USAGE.value

    if result.mode is Mode.PRINT_LOCAL_PRODUCTS_SCRIPT:
        sys.stdout.write(f"{result.output}\n")
    else:
        sys.stdout.write(env.to_shell(shell))

    if not result.success:
        logger.error("Setup step '%s' failed (%d error(s)).", result.mode.value, result.failures)
        return min(result.failures, _MAX_EXIT_CODE)
    return ExitCodes.SUCCESS.value
