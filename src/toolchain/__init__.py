"""Access to the external package manager (UPS) and build tool (MRB)."""

from .base import Toolchain, ToolResult
from .shell import ShellToolchain

__all__ = ["Toolchain", "ToolResult", "ShellToolchain"]
