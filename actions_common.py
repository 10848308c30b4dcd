"""Shared helpers for GitHub Actions entry points."""

from __future__ import annotations

import os
import typing as typ

__all__ = ["normalize_input_env"]


def _dashed_inputs(prefix: str) -> typ.Iterator[tuple[str, str, str]]:
    """Yield ``(key, normalized, value)`` for dashed input variables."""
    alt_prefix = prefix.replace("_", "-")
    for key, value in list(os.environ.items()):
        if key.startswith((prefix, alt_prefix)) and "-" in key:
            yield key, key.replace("-", "_"), value


def normalize_input_env(prefix: str = "INPUT_", *, prefer_dashed: bool = False) -> None:
    """Rewrite dashed ``INPUT_`` variables to their underscore spelling.

    The runner exports action inputs verbatim, so an input declared as
    ``body-path`` arrives as ``INPUT_BODY-PATH`` while the CLI reads
    ``INPUT_BODY_PATH``.

    Parameters
    ----------
    prefix : str, default="INPUT_"
        The environment variable prefix to normalise.
    prefer_dashed : bool, default=False
        If True, dashed variants override existing underscore keys.

    Notes
    -----
    This function modifies ``os.environ`` in place and always removes the
    dashed keys.
    """
    for key, normalized, value in _dashed_inputs(prefix):
        if prefer_dashed or normalized not in os.environ:
            os.environ[normalized] = value
        os.environ.pop(key, None)
