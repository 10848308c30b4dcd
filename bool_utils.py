"""Boolean coercion utilities for GitHub Actions inputs.

GitHub Actions forwards action inputs as strings, so these helpers accept a
variety of truthy/falsy spellings and convert them to bool.
"""

from __future__ import annotations

__all__ = ["coerce_bool", "coerce_optional_bool"]

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def coerce_optional_bool(value: object) -> bool | None:
    """Coerce a value to bool, returning None for None/empty.

    Release flags such as ``draft`` are tri-state: an unset input leaves the
    remote value untouched, so absence must survive coercion.

    Raises
    ------
    ValueError
        If the value cannot be interpreted as a boolean.

    Examples
    --------
    >>> coerce_optional_bool("on")
    True
    >>> coerce_optional_bool("") is None
    True
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if not normalised:
            return None
        if normalised in _TRUTHY:
            return True
        if normalised in _FALSY:
            return False
    msg = f"Cannot interpret {value!r} as boolean"
    raise ValueError(msg)


def coerce_bool(value: object, *, default: bool) -> bool:
    """Coerce a value to bool, returning default for None/empty.

    Parameters
    ----------
    value
        The value to coerce. Accepts bool, str, or None.
    default
        The value to return when ``value`` is None or an empty string.

    Returns
    -------
    bool
        The coerced boolean value.

    Raises
    ------
    ValueError
        If the value is a string that cannot be interpreted as a boolean.

    Examples
    --------
    >>> coerce_bool("true", default=False)
    True
    >>> coerce_bool(None, default=True)
    True
    >>> coerce_bool("", default=False)
    False
    """
    coerced = coerce_optional_bool(value)
    return default if coerced is None else coerced
