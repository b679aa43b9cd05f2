"""CLI entry points registering the scripts in a login shell and searching
path-list variables for files."""

from __future__ import annotations

import glob
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from constants import Constants, ExitCodes
from environment import PATH_SEPARATOR, Environment, is_csh, render_assignment

logger = logging.getLogger(__name__)

_LARSWITCH_FUNCTION = 'function larswitch() {{ cd "$("${{{var}}}/{script}" "$@")" ; }}'

_GOTOREPO_FUNCTIONS = """function gotorepo() {{
	local DirName
	DirName="$("${{{var}}}/{script}" "$@" )" && cd "$DirName"
}}
function nextrepo() {{ gotorepo "${{1:-+1}}" ; }}
function prevrepo() {{ gotorepo "-${{1:-1}}" ; }}"""


def default_script_dir() -> str:
    """Directory holding the running ``larscripts`` executable."""
    return os.path.dirname(os.path.abspath(sys.argv[0]))


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def _alias(name: str, command: str, shell: str) -> str:
    if is_csh(shell):
        return f"alias {name} '{command}'"
    return f"alias {name}='{command}'"


def render_init(script_dir: str, shell: str = "bash", env: Optional[Environment] = None) -> str:
    """Shell code exporting the script directory, adding it to PATH and
    defining the convenience functions whose helpers are available."""
    env = env if env is not None else Environment()
    var = Constants.ENV_SCRIPT_DIR
    lines = [render_assignment(var, script_dir, shell)]
    path = env.get_path("PATH")
    if script_dir not in path:
        lines.append(render_assignment("PATH", PATH_SEPARATOR.join(path + [script_dir]), shell))

    larswitch = os.path.join(script_dir, Constants.HELPER_LARSWITCH)
    if _is_executable(larswitch) and not is_csh(shell):
        lines.append(_LARSWITCH_FUNCTION.format(var=var, script=Constants.HELPER_LARSWITCH))

    find_in_path = os.path.join(script_dir, Constants.HELPER_FIND_IN_PATH)
    if _is_executable(find_in_path):
        lines.append(_alias("FindFCL", f"{find_in_path} --fcl", shell))
    else:
        lines.append(_alias("FindFCL", "larscripts find --fcl", shell))

    gotorepo = os.path.join(script_dir, Constants.HELPER_GOTOREPO)
    if _is_executable(gotorepo) and not is_csh(shell):
        lines.append(_GOTOREPO_FUNCTIONS.format(var=var, script=Constants.HELPER_GOTOREPO))

    return "\n".join(lines) + "\n"


def find_in_path(names: Sequence[str], directories: Sequence[str]) -> Dict[str, List[str]]:
    """Find files by name (wildcards allowed) in directories, in priority order."""
    found: Dict[str, List[str]] = {}
    for name in names:
        matches: List[str] = []
        for directory in directories:
            for match in sorted(glob.glob(os.path.join(glob.escape(directory), name))):
                if os.path.isfile(match) and match not in matches:
                    matches.append(match)
        found[name] = matches
    return found


def run_init(args: Any) -> int:
    """Entry point for the init command."""
    script_dir = os.path.abspath(getattr(args, "SCRIPT_DIR", None) or default_script_dir())
    logger.info("Setting up LArSoft scripts in '%s'", script_dir)
    sys.stdout.write(render_init(script_dir, getattr(args, "SHELL", "bash") or "bash"))
    return ExitCodes.SUCCESS.value


def run_find(args: Any, env: Optional[Environment] = None) -> int:
    """Entry point for the find command."""
    env = env if env is not None else Environment()
    variable = getattr(args, "PATH_VARIABLE", None) or Constants.ENV_FHICL_FILE_PATH
    directories = env.get_path(variable)
    if not directories:
        logger.error("%s is empty: nothing to search.", variable)
        return ExitCodes.FAILURE.value

    exit_code = ExitCodes.SUCCESS.value
    for name, matches in find_in_path(args.NAMES, directories).items():
        if not matches:
            logger.error("'%s' not found in %s", name, variable)
            exit_code = ExitCodes.FAILURE.value
        for match in matches:
            sys.stdout.write(f"{match}\n")
    return exit_code
