"""Environment-variable helpers.

These helpers centralize parsing/normalization of the environment variables
that tune the precision policies and the command line front end.

Notes
-----
These are intentionally forgiving: invalid inputs fall back to defaults rather
than raising, to keep CLI and batch runs robust.
"""

from __future__ import annotations

import os

PRECISION = "SPECFUNPY_PRECISION"
MAX_ITERATIONS = "SPECFUNPY_MAX_ITERATIONS"
MAX_ROOT_ITERATIONS = "SPECFUNPY_MAX_ROOT_ITERATIONS"
LOG_LEVEL = "SPECFUNPY_LOG_LEVEL"

_WIDTHS = {
    "reduced": "reduced",
    "single": "reduced",
    "float32": "reduced",
    "f": "reduced",
    "standard": "standard",
    "double": "standard",
    "float64": "standard",
    "d": "standard",
    "extended": "extended",
    "longdouble": "extended",
    "long double": "extended",
    "float80": "extended",
    "l": "extended",
}


def parse_int_env(name: str, *, default: int | None, minimum: int = 1) -> int | None:
    """Parse an integer environment variable with a lower bound.

    Parameters
    ----------
    name:
        Environment variable name.
    default:
        Default value used when the variable is unset or invalid.
    minimum:
        Lower bound enforced on the returned value.

    Returns
    -------
    int | None
        Parsed integer value (at least ``minimum``), or ``default``.
    """

    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, value)


def normalize_width(value: str, *, default: str = "standard") -> str:
    """Normalize a precision-width selector.

    Parameters
    ----------
    value:
        A raw environment variable value such as ``"float32"`` or ``"l"``.
    default:
        Returned for empty or unknown values.

    Returns
    -------
    str
        One of ``{'reduced', 'standard', 'extended'}``.
    """

    return _WIDTHS.get(value.strip().lower(), default)
