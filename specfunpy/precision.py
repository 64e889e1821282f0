"""Precision policies.

A :class:`Policy` bundles everything an iterative algorithm needs to know about
the floating-point width it runs in: the NumPy scalar type, machine epsilon,
iteration caps and the representable range. Every engine function receives one
and uses the same algorithm for all widths.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum

import numpy as np

from specfunpy.env import normalize_width
from specfunpy.functions.tables import coefficients


class Width(str, Enum):
    REDUCED = "reduced"
    STANDARD = "standard"
    EXTENDED = "extended"


# dtype, max_iterations, max_root_iterations, asymptotic_threshold
_DEFAULTS = {
    Width.REDUCED: (np.float32, 1_000, 100, 10),
    Width.STANDARD: (np.float64, 10_000, 200, 20),
    Width.EXTENDED: (np.longdouble, 20_000, 300, 30),
}

SUFFIXES = {Width.STANDARD: "", Width.REDUCED: "_f", Width.EXTENDED: "_l"}


@dataclass(frozen=True)
class Policy:
    """Numeric traits of one precision width.

    Attributes
    ----------
    width:
        The precision width.
    dtype:
        NumPy scalar type all arithmetic is carried out in.
    epsilon:
        Machine epsilon of ``dtype``.
    max_iterations:
        Cap for series, continued fractions and duplication loops.
    max_root_iterations:
        Cap for the root finders behind the inverse functions.
    underflow_floor, overflow_ceiling:
        Smallest normal and largest finite value.
    log_min, log_max:
        Natural logarithms of the two range limits.
    max_factorial:
        Largest ``n`` with ``n!`` finite.
    asymptotic_threshold:
        Argument above which asymptotic (Stirling type) expansions are used.
    """

    width: Width
    dtype: type
    epsilon: np.floating
    max_iterations: int
    max_root_iterations: int
    underflow_floor: np.floating
    overflow_ceiling: np.floating
    log_min: np.floating
    log_max: np.floating
    max_factorial: int
    asymptotic_threshold: int

    @property
    def integer_limit(self):
        """First power of two above which not every integer is representable."""
        return 2 / self.epsilon


def resolve_width(value) -> Width:
    """Map a width, or one of its aliases, to :class:`Width`."""

    if isinstance(value, Width):
        return value
    if isinstance(value, str):
        name = normalize_width(value, default="")
        if name:
            return Width(name)
    raise ValueError(f"Unknown precision width {value!r}")


def get_policy(width=Width.STANDARD, **overrides) -> Policy:
    """Return the policy of ``width``.

    Parameters
    ----------
    width:
        A :class:`Width` or alias such as ``"float32"``.
    **overrides:
        Field values replacing the defaults (e.g. ``max_iterations``).
        ``asymptotic_threshold`` may only be raised: below the default the
        asymptotic series no longer reach full precision.

    Returns
    -------
    Policy
        A new immutable policy record.

    Raises
    ------
    ValueError
        For an unknown width or an ``asymptotic_threshold`` below the default.
    """

    width = resolve_width(width)
    dtype, iterations, root_iterations, threshold = _DEFAULTS[width]
    info = np.finfo(dtype)
    policy = Policy(
        width=width,
        dtype=dtype,
        epsilon=info.eps,
        max_iterations=iterations,
        max_root_iterations=root_iterations,
        underflow_floor=info.tiny,
        overflow_ceiling=info.max,
        log_min=np.log(info.tiny),
        log_max=np.log(info.max),
        max_factorial=len(coefficients(dtype).factorials) - 1,
        asymptotic_threshold=threshold,
    )
    if overrides:
        policy = dataclasses.replace(policy, **overrides)
    if policy.asymptotic_threshold < threshold:
        raise ValueError(
            f"asymptotic_threshold for the {width.value} width must be at least "
            f"{threshold}, got {policy.asymptotic_threshold}"
        )
    return policy


REDUCED = get_policy(Width.REDUCED)
STANDARD = get_policy(Width.STANDARD)
EXTENDED = get_policy(Width.EXTENDED)
