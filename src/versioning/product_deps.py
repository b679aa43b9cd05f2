"""Reader for the UPS ``ups/product_deps`` dependency declaration file."""

from __future__ import annotations

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_PARENT_LINE = re.compile(r"^\s*parent\s+")


def read_parent_version(path: str) -> Optional[str]:
    """Return the parent version declared in a product_deps file.

    The first line starting with ``parent`` is used; the version is its third
    whitespace-separated field (``parent <product> <version> ...``).

    Args:
        path: Path of the product_deps file.

    Returns:
        The version string, or None if the file declares no usable parent line.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8", errors="replace") as handle:
        for line in handle:
            if not _PARENT_LINE.match(line):
                continue
            fields = line.split()
            if len(fields) < 3:
                logger.debug("Parent line without version in %s: %r", path, line.rstrip())
                return None
            return fields[2]
    return None
