"""Toolchain implementation running UPS and MRB through bash."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from typing import Dict, List, Optional, Sequence

from constants import Constants
from environment import Environment
from exceptions import ConfigurationError
from toolchain.base import Toolchain, ToolResult

logger = logging.getLogger(__name__)

# Sources the command in the current shell, then dumps the resulting
# environment (NUL separated) into the file named by the first argument.
_SOURCE_WRAPPER = (
    '__larscripts_dump="$1"; shift; '
    "{command}; "
    "__larscripts_rc=$?; "
    'env -0 > "$__larscripts_dump"; '
    "exit $__larscripts_rc"
)

# variables bash sets on its own which must not leak back
_SHELL_NOISE = {"_", "SHLVL", "PWD", "OLDPWD", "__larscripts_dump", "__larscripts_rc", "__larscripts_file"}

# functions exported by bash (export -f) travel as BASH_FUNC_<name>%% variables
_FUNCTION_PREFIX = "BASH_FUNC_"


def parse_env_dump(data: bytes) -> Dict[str, str]:
    """Parse the output of ``env -0``."""
    variables: Dict[str, str] = {}
    for entry in data.split(b"\0"):
        if not entry or b"=" not in entry:
            continue
        name, _, value = entry.partition(b"=")
        variables[name.decode("utf-8", "replace")] = value.decode("utf-8", "replace")
    return variables


class ShellToolchain(Toolchain):
    """Runs UPS and MRB commands in a child bash sharing an ``Environment``."""

    def __init__(self, env: Environment, shell: str = "bash", cwd: Optional[str] = None):
        self.env = env
        self.shell = shell
        self.cwd = cwd

    def _relay(self, output: str) -> List[str]:
        lines = output.splitlines()
        for line in lines:
            logger.info("%s%s", Constants.OUTPUT_PREFIX, line)
        return lines

    def run(self, argv: Sequence[str]) -> ToolResult:
        """Run a command with the current environment, relaying its output."""
        command = " ".join(shlex.quote(a) for a in argv)
        logger.info(" ==> %s", command)
        try:
            proc = subprocess.run(  # noqa: S603
                list(argv),
                env=self.env.as_dict(),
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.error("Can't run '%s': %s", command, e)
            return ToolResult(returncode=127, output=[str(e)], command=command)
        lines = self._relay(proc.stdout or "")
        return ToolResult(returncode=proc.returncode, output=lines, command=command)

    def source(self, command: str) -> ToolResult:
        """Evaluate a shell command in a child shell and import its environment."""
        logger.debug("Sourcing: %s", command)
        fd, dump_path = tempfile.mkstemp(prefix="larscripts-env-")
        os.close(fd)
        try:
            try:
                proc = subprocess.run(  # noqa: S603
                    [self.shell, "-c", _SOURCE_WRAPPER.format(command=command), self.shell, dump_path],
                    env=self.env.as_dict(),
                    cwd=self.cwd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    check=False,
                )
            except OSError as e:
                logger.error("Can't run %s: %s", self.shell, e)
                return ToolResult(returncode=127, output=[str(e)], command=command)
            lines = self._relay(proc.stdout or "")
            if proc.returncode == 0:
                with open(dump_path, "rb") as handle:
                    variables = parse_env_dump(handle.read())
                if variables:
                    exported_functions = [name for name in variables if name.startswith(_FUNCTION_PREFIX)]
                    for name in _SHELL_NOISE.union(exported_functions):
                        variables.pop(name, None)
                    for name in self.env.as_dict():
                        if name in _SHELL_NOISE or name.startswith(_FUNCTION_PREFIX):
                            variables[name] = self.env[name]
                    self.env.replace(variables)
            return ToolResult(returncode=proc.returncode, output=lines, command=command)
        finally:
            try:
                os.unlink(dump_path)
            except OSError:
                logger.debug("Failed to remove temp file: %s", dump_path)

    def bootstrap(self, script: str, *args: str) -> ToolResult:
        command = " ".join(shlex.quote(a) for a in (script,) + args)
        return self.source(f"source {command}")

    def setup(self, name: str, version: Optional[str] = None, qualifiers: Optional[str] = None) -> ToolResult:
        ups_dir = self.env.get(Constants.ENV_UPS_DIR)
        if not ups_dir:
            raise ConfigurationError("UPS is not configured (UPS_DIR is not set)")
        argv = [os.path.join(ups_dir, "bin", "ups"), "setup", name]
        if version:
            argv.append(version)
        if qualifiers:
            argv += ["-q", qualifiers]
        ups_command = " ".join(shlex.quote(a) for a in argv)
        logger.info("setup %s %s %s", name, version or "", f"-q {qualifiers}" if qualifiers else "")
        return self.source(f'__larscripts_file="$({ups_command})" && source "$__larscripts_file"')

    def build_tool(self, args: Sequence[str], source: bool = False) -> ToolResult:
        argv = [Constants.BUILD_TOOL] + list(args)
        if not source:
            return self.run(argv)
        return self.source("source " + " ".join(shlex.quote(a) for a in argv))
