"""Cardinal B-splines.

The centered spline of order ``n`` is the ``n``-fold convolution of the box
function with itself and is supported on ``[-(n+1)/2, (n+1)/2]``. Values come
from the recursion

    B_m(t) = ((m+1)/2 + t)/m · B_(m-1)(t + 1/2) + ((m+1)/2 - t)/m · B_(m-1)(t - 1/2)

evaluated bottom-up from the box function, so every lower order value is
computed once.
"""

from __future__ import annotations

from specfunpy.errors import DomainError
from specfunpy.functions import misc
from specfunpy.precision import STANDARD, Policy


def _box(t, policy: Policy):
    magnitude = abs(t)
    if magnitude < 0.5:
        return policy.dtype(1)
    if magnitude == 0.5:
        return policy.dtype(0.5)
    return policy.dtype(0)


def _b_spline(n: int, x, policy: Policy):
    ax = abs(x)
    half = policy.dtype(n + 1) / 2
    if ax > half:
        return policy.dtype(0)
    if ax == half:
        return policy.dtype(0.5) if n == 0 else policy.dtype(0)
    values = [_box(ax + j - policy.dtype(n) / 2, policy) for j in range(n + 1)]
    for m in range(1, n + 1):
        h = policy.dtype(m + 1) / 2
        for j in range(n - m + 1):
            t = ax + j - policy.dtype(n - m) / 2
            values[j] = ((h + t) * values[j + 1] + (h - t) * values[j]) / m
    return values[0]


def cardinal_b_spline(n, x, policy: Policy = STANDARD):
    """Centered cardinal B-spline B_n(x).

    Parameters
    ----------
    n:
        Non-negative integer order.
    x:
        Evaluation point; the value is exactly zero outside
        ``[-(n+1)/2, (n+1)/2]``.
    policy:
        Precision policy.
    """

    n = misc.order("cardinal_b_spline", "n", n)
    (x,) = misc.arguments("cardinal_b_spline", policy, x=x)
    return _b_spline(n, x, policy)


def _minimum_order(function: str, n: int, minimum: int) -> None:
    if n < minimum:
        raise DomainError(
            f"{function}: requires n >= {minimum}, got n={n}", function=function
        )


def cardinal_b_spline_prime(n, x, policy: Policy = STANDARD):
    """First derivative ``B_(n-1)(x + 1/2) - B_(n-1)(x - 1/2)``, ``n >= 1``."""

    function = "cardinal_b_spline_prime"
    n = misc.order(function, "n", n)
    (x,) = misc.arguments(function, policy, x=x)
    _minimum_order(function, n, 1)
    return _b_spline(n - 1, x + 0.5, policy) - _b_spline(n - 1, x - 0.5, policy)


def cardinal_b_spline_double_prime(n, x, policy: Policy = STANDARD):
    """Second derivative ``B_(n-2)(x+1) - 2 B_(n-2)(x) + B_(n-2)(x-1)``, ``n >= 2``."""

    function = "cardinal_b_spline_double_prime"
    n = misc.order(function, "n", n)
    (x,) = misc.arguments(function, policy, x=x)
    _minimum_order(function, n, 2)
    return (
        _b_spline(n - 2, x + 1, policy)
        - 2 * _b_spline(n - 2, x, policy)
        + _b_spline(n - 2, x - 1, policy)
    )


def forward_cardinal_b_spline(n, x, policy: Policy = STANDARD):
    """One-sided B-spline ``B_n(x - (n+1)/2)`` supported on ``[0, n+1]``."""

    function = "forward_cardinal_b_spline"
    n = misc.order(function, "n", n)
    (x,) = misc.arguments(function, policy, x=x)
    if x < 0 or x > n + 1:
        return policy.dtype(0)
    return _b_spline(n, x - policy.dtype(n + 1) / 2, policy)

