"""Carlson symmetric elliptic integrals RC, RF, RD, RJ and RG.

The duplication theorem shrinks the spread of the arguments by a factor four
per step until a truncated Taylor expansion about their mean is accurate to
machine precision.

References
----------
.. [1] B. C. Carlson, "Numerical computation of real or complex elliptic
   integrals", Numerical Algorithms 10 (1995) 13-26.
"""

from __future__ import annotations

import numpy as np

from specfunpy import log
from specfunpy.errors import DomainError
from specfunpy.functions import misc
from specfunpy.precision import STANDARD, Policy

_log = log.numerics_logger(__name__)


def _exhausted(function: str, policy: Policy, estimate):
    return misc.convergence_failure(function, policy.max_iterations, estimate)


def _rc(function: str, x, y, policy: Policy):
    """RC(x, y) for x >= 0, y > 0."""

    if x == y:
        return 1 / np.sqrt(x)
    y0 = y
    a0 = (x + 2 * y) / 3
    q = np.power(3 * policy.epsilon, policy.dtype(-1) / 8) * abs(a0 - x)
    a = a0
    factor = policy.dtype(1)
    for _ in range(policy.max_iterations):
        if q * factor < abs(a):
            break
        lam = 2 * np.sqrt(x) * np.sqrt(y) + y
        a = (a + lam) / 4
        x = (x + lam) / 4
        y = (y + lam) / 4
        factor = factor / 4
    else:
        raise _exhausted(function, policy, a)
    s = (y0 - a0) * factor / a
    poly = 1 + s * s * (
        policy.dtype(3) / 10
        + s
        * (
            policy.dtype(1) / 7
            + s
            * (
                policy.dtype(3) / 8
                + s * (policy.dtype(9) / 22 + s * (policy.dtype(159) / 208 + s * 9 / 8))
            )
        )
    )
    return poly / np.sqrt(a)


def _rc_any(function: str, x, y, policy: Policy):
    """RC(x, y) for x >= 0, y != 0; Cauchy principal value for y < 0."""

    if y > 0:
        return _rc(function, x, y, policy)
    return np.sqrt(x / (x - y)) * _rc(function, x - y, -y, policy)


def _rf(function: str, x, y, z, policy: Policy):
    """RF(x, y, z) for non-negative arguments with at most one zero."""

    x0, y0 = x, y
    a0 = (x + y + z) / 3
    q = np.power(3 * policy.epsilon, policy.dtype(-1) / 6) * max(
        abs(a0 - x), abs(a0 - y), abs(a0 - z)
    )
    a = a0
    factor = policy.dtype(1)
    for iteration in range(policy.max_iterations):
        if q * factor < abs(a):
            break
        sx, sy, sz = np.sqrt(x), np.sqrt(y), np.sqrt(z)
        lam = sx * sy + sx * sz + sy * sz
        a = (a + lam) / 4
        x = (x + lam) / 4
        y = (y + lam) / 4
        z = (z + lam) / 4
        factor = factor / 4
    else:
        raise _exhausted(function, policy, a)
    _log.numerics("%s: %d duplication steps", function, iteration)
    dx = (a0 - x0) * factor / a
    dy = (a0 - y0) * factor / a
    dz = -(dx + dy)
    e2 = dx * dy - dz * dz
    e3 = dx * dy * dz
    poly = (
        1
        + e3 * (policy.dtype(1) / 14 + 3 * e3 / 104)
        + e2 * (policy.dtype(-1) / 10 + e2 / 24 - 3 * e3 / 44 - 5 * e2 * e2 / 208 + e2 * e3 / 16)
    )
    return poly / np.sqrt(a)


def _rd(function: str, x, y, z, policy: Policy):
    """RD(x, y, z) for x, y >= 0 with x + y > 0 and z > 0."""

    x0, y0 = x, y
    a0 = (x + y + 3 * z) / 5
    q = np.power(policy.epsilon / 4, policy.dtype(-1) / 6) * max(
        abs(a0 - x), abs(a0 - y), abs(a0 - z)
    )
    a = a0
    factor = policy.dtype(1)
    total = policy.dtype(0)
    for iteration in range(policy.max_iterations):
        if q * factor < abs(a):
            break
        sx, sy, sz = np.sqrt(x), np.sqrt(y), np.sqrt(z)
        lam = sx * sy + sx * sz + sy * sz
        total += factor / (sz * (z + lam))
        a = (a + lam) / 4
        x = (x + lam) / 4
        y = (y + lam) / 4
        z = (z + lam) / 4
        factor = factor / 4
    else:
        raise _exhausted(function, policy, a)
    _log.numerics("%s: %d duplication steps", function, iteration)
    dx = (a0 - x0) * factor / a
    dy = (a0 - y0) * factor / a
    dz = -(dx + dy) / 3
    xy = dx * dy
    z2 = dz * dz
    e2 = xy - 6 * z2
    e3 = (3 * xy - 8 * z2) * dz
    e4 = 3 * (xy - z2) * z2
    e5 = xy * z2 * dz
    poly = (
        1
        - 3 * e2 / 14
        + e3 / 6
        + 9 * e2 * e2 / 88
        - 3 * e4 / 22
        - 9 * e2 * e3 / 52
        + 3 * e5 / 26
    )
    return factor * poly / (a * np.sqrt(a)) + 3 * total


def _rj(function: str, x, y, z, p, policy: Policy):
    """RJ(x, y, z, p) for p > 0."""

    x0, y0, z0 = x, y, z
    a0 = (x + y + z + 2 * p) / 5
    delta = (p - x) * (p - y) * (p - z)
    q = np.power(policy.epsilon / 4, policy.dtype(-1) / 6) * max(
        abs(a0 - x), abs(a0 - y), abs(a0 - z), abs(a0 - p)
    )
    a = a0
    factor = policy.dtype(1)
    total = policy.dtype(0)
    for iteration in range(policy.max_iterations):
        if q * factor < abs(a):
            break
        sx, sy, sz, sp = np.sqrt(x), np.sqrt(y), np.sqrt(z), np.sqrt(p)
        lam = sx * sy + sx * sz + sy * sz
        d = (sp + sx) * (sp + sy) * (sp + sz)
        e = delta * factor * factor * factor / (d * d)
        total += factor * _rc_any(function, policy.dtype(1), 1 + e, policy) / d
        a = (a + lam) / 4
        x = (x + lam) / 4
        y = (y + lam) / 4
        z = (z + lam) / 4
        p = (p + lam) / 4
        factor = factor / 4
    else:
        raise _exhausted(function, policy, a)
    _log.numerics("%s: %d duplication steps", function, iteration)
    dx = (a0 - x0) * factor / a
    dy = (a0 - y0) * factor / a
    dz = (a0 - z0) * factor / a
    dp = -(dx + dy + dz) / 2
    xyz = dx * dy * dz
    p2 = dp * dp
    e2 = dx * dy + dx * dz + dy * dz - 3 * p2
    e3 = xyz + 2 * e2 * dp + 4 * p2 * dp
    e4 = (2 * xyz + e2 * dp + 3 * p2 * dp) * dp
    e5 = xyz * p2
    poly = (
        1
        - 3 * e2 / 14
        + e3 / 6
        + 9 * e2 * e2 / 88
        - 3 * e4 / 22
        - 9 * e2 * e3 / 52
        + 3 * e5 / 26
    )
    return factor * poly / (a * np.sqrt(a)) + 6 * total


def _rj_principal_value(function: str, x, y, z, p, policy: Policy):
    """Cauchy principal value of RJ for p < 0."""

    x, y, z = sorted((x, y, z))
    q = -p
    shifted = (z * (x + y + q) - x * y) / (z + q)
    xy = x * y
    value = (shifted - z) * _rj(function, x, y, z, shifted, policy)
    value -= 3 * _rf(function, x, y, z, policy)
    value += (
        3
        * np.sqrt(x * y * z / (xy + shifted * q))
        * _rc(function, xy + shifted * q, shifted * q, policy)
    )
    return value / (z + q)


def _require(function: str, condition: bool, message: str) -> None:
    if not condition:
        raise DomainError(f"{function}: {message}", function=function)


def _at_most_one_zero(*values) -> bool:
    return sum(1 for v in values if v == 0) <= 1


@misc.quiet
def ellint_rc(x, y, policy: Policy = STANDARD):
    """Carlson's degenerate integral RC(x, y).

    ``RC(x, y) = 1/2 ∫_0^∞ (t+x)^(-1/2) (t+y)^(-1) dt``; for ``y < 0`` the
    Cauchy principal value is returned.
    """

    function = "ellint_rc"
    x, y = misc.arguments(function, policy, x=x, y=y)
    _require(function, x >= 0, f"requires x >= 0, got x={x}")
    _require(function, y != 0, "requires y != 0")
    return misc.finite(function, _rc_any(function, x, y, policy))


@misc.quiet
def ellint_rf(x, y, z, policy: Policy = STANDARD):
    """Carlson's integral of the first kind RF(x, y, z).

    Parameters
    ----------
    x, y, z:
        Non-negative, at most one of them zero.
    policy:
        Precision policy.

    Raises
    ------
    DomainError
        For negative arguments or more than one zero.
    ConvergenceError
        When the duplication does not converge within ``policy.max_iterations``.
    """

    function = "ellint_rf"
    x, y, z = misc.arguments(function, policy, x=x, y=y, z=z)
    _require(function, min(x, y, z) >= 0, "arguments must be non-negative")
    _require(function, _at_most_one_zero(x, y, z), "at most one argument may be zero")
    return misc.finite(function, _rf(function, x, y, z, policy))


@misc.quiet
def ellint_rd(x, y, z, policy: Policy = STANDARD):
    """Carlson's integral of the second kind RD(x, y, z) = RJ(x, y, z, z)."""

    function = "ellint_rd"
    x, y, z = misc.arguments(function, policy, x=x, y=y, z=z)
    _require(function, x >= 0 and y >= 0, "requires x >= 0 and y >= 0")
    _require(function, x + y > 0, "x and y may not both be zero")
    _require(function, z > 0, f"requires z > 0, got z={z}")
    return misc.finite(function, _rd(function, x, y, z, policy))


@misc.quiet
def ellint_rj(x, y, z, p, policy: Policy = STANDARD):
    """Carlson's integral of the third kind RJ(x, y, z, p).

    For ``p < 0`` the Cauchy principal value is computed from RJ at a
    positive ``p``, RF and RC.
    """

    function = "ellint_rj"
    x, y, z, p = misc.arguments(function, policy, x=x, y=y, z=z, p=p)
    _require(function, min(x, y, z) >= 0, "x, y and z must be non-negative")
    _require(function, _at_most_one_zero(x, y, z), "at most one of x, y, z may be zero")
    _require(function, p != 0, "requires p != 0")
    if p > 0:
        value = _rj(function, x, y, z, p, policy)
    else:
        value = _rj_principal_value(function, x, y, z, p, policy)
    return misc.finite(function, value)


@misc.quiet
def ellint_rg(x, y, z, policy: Policy = STANDARD):
    """Carlson's symmetric integral RG(x, y, z)."""

    function = "ellint_rg"
    x, y, z = misc.arguments(function, policy, x=x, y=y, z=z)
    _require(function, min(x, y, z) >= 0, "arguments must be non-negative")
    # Order so that x >= z >= y; the middle value is the pivot.
    x, z, y = sorted((x, y, z), reverse=True)
    if z == 0:
        return np.sqrt(x) / 2
    value = (
        z * _rf(function, x, y, z, policy)
        - (x - z) * (y - z) * _rd(function, x, y, z, policy) / 3
        + np.sqrt(x * y / z)
    ) / 2
    return misc.finite(function, value)
