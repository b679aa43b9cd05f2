"""UPS qualifier string utilities."""

from typing import Iterable, Optional

from constants import Constants


def sort_qualifiers(
    qualifiers: Optional[str],
    separator: str = Constants.QUALIFIER_SEPARATOR,
    trailing: Iterable[str] = Constants.BUILD_MODE_QUALIFIERS,
) -> str:
    """Return the canonical form of a qualifier string.

    Qualifiers are sorted alphabetically, except the build-mode ones
    (``prof``, ``opt``, ``debug``) which are moved to the end keeping their
    relative input order. Empty tokens are dropped; repeated tokens are kept.

    >>> sort_qualifiers("e20:debug:c2")
    'c2:e20:debug'
    >>> sort_qualifiers("prof:a:opt")
    'a:prof:opt'
    """
    if not qualifiers:
        return ""
    trailing = tuple(trailing)
    tokens = [token for token in qualifiers.split(separator) if token]
    modes = [token for token in tokens if token in trailing]
    others = sorted(token for token in tokens if token not in trailing)
    return separator.join(others + modes)


def qualifiers_to_path(qualifiers: Optional[str], separator: str = Constants.QUALIFIER_SEPARATOR) -> str:
    """Turn a qualifier string into the form used in directory names."""
    return (qualifiers or "").replace(separator, "_")
