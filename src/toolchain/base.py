"""Capability interface of the external tools the setup steps delegate to."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass
class ToolResult:
    """Outcome of one external tool invocation."""

    returncode: int = 0
    output: List[str] = field(default_factory=list)
    command: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Toolchain(abc.ABC):
    """External tools acting on an ``Environment``.

    Implementations update the environment they are bound to when an
    invocation succeeds, and leave it untouched otherwise.
    """

    @abc.abstractmethod
    def bootstrap(self, script: str, *args: str) -> ToolResult:
        """Source a setup script."""

    @abc.abstractmethod
    def setup(self, name: str, version: Optional[str] = None, qualifiers: Optional[str] = None) -> ToolResult:
        """Set up a product with the package manager."""

    @abc.abstractmethod
    def build_tool(self, args: Sequence[str], source: bool = False) -> ToolResult:
        """Run a build tool subcommand, or source it when ``source`` is set."""
