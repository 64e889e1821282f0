"""Shared numerical helpers: argument checks, trigonometry in units of pi,
range-checked exponentials.
"""

from __future__ import annotations

import functools
import operator

import numpy as np

from specfunpy import log
from specfunpy.errors import ConvergenceError, DomainError, ResultOverflowError
from specfunpy.functions.tables import coefficients

_log = log.numerics_logger(__name__)


def quiet(function):
    """Run ``function`` with NumPy floating-point warnings silenced.

    Engines check their results explicitly and raise instead.
    """

    @functools.wraps(function)
    def wrapper(*args, **kwargs):
        with np.errstate(over="ignore", under="ignore", divide="ignore"):
            return function(*args, **kwargs)

    return wrapper


def arguments(function: str, policy, **values) -> tuple:
    """Convert arguments to the policy dtype and reject non-finite values.

    Parameters
    ----------
    function:
        Operation name used in error messages.
    policy:
        The active :class:`~specfunpy.precision.Policy`.
    **values:
        Named arguments in call order.

    Returns
    -------
    tuple
        The converted arguments in the order given.
    """

    converted = []
    for name, value in values.items():
        try:
            cast = policy.dtype(value)
        except (TypeError, ValueError) as exc:
            raise DomainError(
                f"{function}: {name} must be a real number, got {value!r}",
                function=function,
            ) from exc
        if not np.isfinite(cast):
            raise DomainError(
                f"{function}: {name} must be finite, got {value!r}",
                function=function,
            )
        converted.append(cast)
    return tuple(converted)


def order(function: str, name: str, value) -> int:
    """Validate a degree, order or index and return it as ``int``."""

    if isinstance(value, (bool, np.bool_)):
        raise DomainError(
            f"{function}: {name} must be a non-negative integer, got {value!r}",
            function=function,
        )
    try:
        index = operator.index(value)
    except TypeError:
        raise DomainError(
            f"{function}: {name} must be a non-negative integer, got {value!r}",
            function=function,
        ) from None
    if index < 0:
        raise DomainError(
            f"{function}: {name} must be non-negative, got {index}",
            function=function,
        )
    return index


def is_pole(x) -> bool:
    """True for the non-positive integers."""
    return bool(x <= 0 and x == np.floor(x))


def is_integer(x) -> bool:
    return bool(x == np.floor(x))


def finite(function: str, value):
    """Return ``value`` or raise :class:`ResultOverflowError` if it is not finite."""

    if not np.isfinite(value):
        raise ResultOverflowError(
            f"{function}: result is outside the representable range",
            function=function,
        )
    return value


def scaled_exp(function: str, log_value, factor, policy):
    """Evaluate ``factor * exp(log_value)`` without spurious overflow.

    Results below the underflow floor flush to a signed zero; results above
    the overflow ceiling raise :class:`ResultOverflowError`.
    """

    if policy.log_min < log_value < policy.log_max:
        result = factor * np.exp(log_value)
    else:
        magnitude = np.exp(log_value + np.log(abs(factor)))
        result = -magnitude if factor < 0 else magnitude
    return finite(function, result)


def convergence_failure(function: str, iterations: int, estimate=None):
    """Log and build the :class:`ConvergenceError` for an exhausted loop."""

    _log.warning(
        "%s did not converge within %d iterations (last estimate %r)",
        function,
        iterations,
        estimate,
    )
    return ConvergenceError(
        f"{function}: no convergence within {iterations} iterations",
        function=function,
        iterations=iterations,
        estimate=estimate,
    )


def sinpi(x, policy):
    """sin(pi x) with exact argument reduction; exactly zero at integers."""

    c = coefficients(policy.dtype)
    sign = -1 if x < 0 else 1
    r = np.fmod(abs(x), 2)
    if r >= 1:
        r = r - 1
        sign = -sign
    if r > 0.5:
        r = 1 - r
    if r <= 0.25:
        value = np.sin(c.pi * r)
    else:
        value = np.cos(c.pi * (0.5 - r))
    return -value if sign < 0 else value


def cospi(x, policy):
    """cos(pi x) with exact argument reduction; exactly zero at half integers."""

    c = coefficients(policy.dtype)
    r = np.fmod(abs(x), 2)
    if r > 1:
        r = 2 - r
    sign = 1
    if r > 0.5:
        r = 1 - r
        sign = -1
    if r <= 0.25:
        value = np.cos(c.pi * r)
    else:
        value = np.sin(c.pi * (0.5 - r))
    return -value if sign < 0 else value


def log1pmx(d, policy):
    """log(1 + d) - d, accurate for small ``d``."""

    if abs(d) >= 0.5:
        return np.log1p(d) - d
    power = d
    total = policy.dtype(0)
    for k in range(2, 256):
        power = power * -d
        term = power / k
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            break
    return total
