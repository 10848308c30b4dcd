"""Expand asset glob patterns into the files uploaded to a release.

Patterns follow :mod:`glob` semantics with ``recursive=True``: ``*`` and ``?``
match within a path component, ``[...]`` matches a character class and ``**``
matches zero or more directories when it forms a whole component.

Example usage::

    from gh_release.resolution import resolve_patterns

    paths = resolve_patterns(["dist/*.tar.gz", "dist/**/*.sha256"])
"""

from __future__ import annotations

import glob
import re
import typing as typ
from pathlib import Path

from .errors import ConfigError

__all__ = ["resolve_patterns", "unmatched_patterns", "validate_patterns"]

_SEPARATORS = re.compile(r"[\\/]")


def _closing_bracket(pattern: str, start: int) -> int:
    """Return the index of the ``]`` closing the class opened at ``start``."""
    index = start + 1
    if index < len(pattern) and pattern[index] == "!":
        index += 1
    # A leading ``]`` is a literal member of the class.
    if index < len(pattern) and pattern[index] == "]":
        index += 1
    return pattern.find("]", index)


def _check_brackets(pattern: str) -> None:
    index = pattern.find("[")
    while index != -1:
        closing = _closing_bracket(pattern, index)
        if closing == -1:
            msg = f"Invalid glob pattern {pattern!r}: unclosed '[' at position {index}"
            raise ConfigError(msg)
        index = pattern.find("[", closing + 1)


def _check_recursive_wildcards(pattern: str) -> None:
    for component in _SEPARATORS.split(pattern):
        if "**" in component and component != "**":
            msg = (
                f"Invalid glob pattern {pattern!r}: '**' must be a whole "
                f"path component, got {component!r}"
            )
            raise ConfigError(msg)


def validate_patterns(patterns: typ.Iterable[str]) -> None:
    """Raise :class:`ConfigError` if any pattern has invalid glob syntax."""
    for pattern in patterns:
        _check_brackets(pattern)
        _check_recursive_wildcards(pattern)


def _expand(pattern: str) -> list[Path]:
    """Return the regular files matching ``pattern`` in sorted order."""
    matches = sorted(glob.glob(pattern, recursive=True))
    return [path for match in matches if (path := Path(match)).is_file()]


def resolve_patterns(patterns: typ.Sequence[str]) -> list[Path]:
    """Return the regular files matched by ``patterns``.

    Parameters
    ----------
    patterns
        Glob patterns, applied independently and in order.

    Returns
    -------
    list[Path]
        Union of the matches. A path matched by several patterns is kept at
        its first position; directories and other non-regular entries are
        dropped. Patterns matching nothing contribute nothing.

    Raises
    ------
    ConfigError
        If any pattern has invalid syntax. Validation happens before any
        pattern is expanded, so no partial result is produced.
    """
    validate_patterns(patterns)
    resolved: dict[Path, None] = {}
    for pattern in patterns:
        for path in _expand(pattern):
            resolved.setdefault(path, None)
    return list(resolved)


def unmatched_patterns(patterns: typ.Sequence[str]) -> list[str]:
    """Return the patterns that match no regular file."""
    validate_patterns(patterns)
    return [pattern for pattern in patterns if not _expand(pattern)]
