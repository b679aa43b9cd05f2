"""Explicit environment state for the setup modes.

Mode handlers never touch ``os.environ``: they read and edit an
``Environment`` object, and the accumulated changes are rendered at the
boundary as shell statements for the calling shell to evaluate.
"""

from __future__ import annotations

import os
import re
import shlex
from typing import Dict, Iterable, List, Mapping, Optional

PATH_SEPARATOR = os.pathsep

SUPPORTED_SHELLS = ["bash", "sh", "zsh", "csh", "tcsh"]

# names a shell can assign; env may carry others (e.g. BASH_FUNC_name%%)
_SHELL_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def split_path(value: Optional[str], separator: str = PATH_SEPARATOR) -> List[str]:
    """Split a path-list value, dropping empty entries."""
    if not value:
        return []
    return [item for item in value.split(separator) if item]


def dedupe_paths(paths: Iterable[str]) -> List[str]:
    """Remove repeated entries, the first occurrence keeping its priority."""
    seen = set()
    result = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        result.append(path)
    return result


def dedupe_path_string(value: Optional[str], separator: str = PATH_SEPARATOR) -> str:
    """Deduplicate a path-list string.

    >>> dedupe_path_string("/a:/b:/a:/c")
    '/a:/b:/c'
    """
    return separator.join(dedupe_paths(split_path(value, separator)))


def is_csh(shell: str) -> bool:
    return os.path.basename(shell) in ("csh", "tcsh")


def render_assignment(name: str, value: Optional[str], shell: str = "bash") -> str:
    """Render one variable change as a statement for the given shell."""
    if is_csh(shell):
        if value is None:
            return f"unsetenv {name}"
        return f"setenv {name} {shlex.quote(value)}"
    if value is None:
        return f"unset {name}"
    return f"export {name}={shlex.quote(value)}"


class Environment:
    """A mutable set of environment variables with change tracking."""

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        """Initialize from a mapping, by default a copy of ``os.environ``.

        Args:
            variables: Initial variables; changes are tracked against them.
        """
        source = os.environ if variables is None else variables
        self._vars: Dict[str, str] = dict(source)
        self._initial: Dict[str, str] = dict(source)

    def __contains__(self, name: str) -> bool:
        return name in self._vars

    def __getitem__(self, name: str) -> str:
        return self._vars[name]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._vars.get(name, default)

    def set(self, name: str, value: str) -> None:
        self._vars[name] = str(value)

    def unset(self, name: str) -> None:
        self._vars.pop(name, None)

    def replace(self, variables: Mapping[str, str]) -> None:
        """Replace the whole variable set (e.g. after sourcing a script)."""
        self._vars = dict(variables)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._vars)

    # path lists

    def get_path(self, name: str) -> List[str]:
        return split_path(self._vars.get(name))

    def set_path(self, name: str, paths: Iterable[str]) -> None:
        self._vars[name] = PATH_SEPARATOR.join(paths)

    def append_path(self, name: str, *paths: str) -> None:
        """Add directories at the end (lowest priority)."""
        self.set_path(name, self.get_path(name) + list(paths))

    def prepend_path(self, name: str, *paths: str) -> None:
        """Add directories at the front (highest priority)."""
        self.set_path(name, list(paths) + self.get_path(name))

    def dedupe_path(self, name: str) -> None:
        if name in self._vars:
            self.set_path(name, dedupe_paths(self.get_path(name)))

    # boundary

    def changes(self) -> Dict[str, Optional[str]]:
        """Variables changed since creation; removed ones map to None."""
        changed: Dict[str, Optional[str]] = {
            name: value for name, value in self._vars.items()
            if self._initial.get(name) != value
        }
        for name in self._initial:
            if name not in self._vars:
                changed[name] = None
        return changed

    def to_shell(self, shell: str = "bash") -> str:
        """Render the accumulated changes as statements for ``eval``."""
        lines = [
            render_assignment(name, value, shell)
            for name, value in sorted(self.changes().items())
            if _SHELL_NAME.match(name)
        ]
        return "\n".join(lines) + ("\n" if lines else "")
