"""Data models for the setup modes."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from config import Settings, default_config
from environment import Environment
from exceptions import UnsupportedModeError
from toolchain.base import Toolchain

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Setup steps, usually run in the order base, localproducts,
    localproductssetup, larsoft, build."""
    BASE = "base"
    PRINT_LOCAL_PRODUCTS_SCRIPT = "printlocalproductsscript"
    LOCAL_PRODUCTS = "localproducts"
    LOCAL_PRODUCTS_SETUP = "localproductssetup"
    LARSOFT = "larsoft"
    BUILD = "build"
    ARTENV = "artenv"


def parse_mode(token: str) -> Mode:
    """Map a mode keyword to its ``Mode``.

    Raises:
        UnsupportedModeError: If the keyword is not a known mode.
    """
    try:
        return Mode((token or "").strip().lower())
    except ValueError as e:
        raise UnsupportedModeError(token) from e


@dataclass
class ModeRequest:
    """Positional arguments of a setup step."""
    mode: Mode
    version: str = ""
    qualifiers: str = ""
    experiment: str = ""
    package: str = ""
    package_version: str = ""


@dataclass
class ModeContext:
    """What a setup step works on."""
    env: Environment
    toolchain: Toolchain
    settings: Settings = field(default_factory=lambda: Settings.from_mapping(default_config()))
    cwd: str = field(default_factory=os.getcwd)


@dataclass
class ModeResult:
    """Outcome of a setup step: it succeeded if nothing failed."""
    mode: Mode
    failures: int = 0
    messages: List[str] = field(default_factory=list)
    output: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failures == 0

    def fail(self, message: str) -> None:
        """Record a failure and its diagnostic."""
        self.failures += 1
        self.messages.append(message)
        logger.error(message)

    def note(self, message: str) -> None:
        self.messages.append(message)
        logger.info(message)
