"""Digamma, polygamma and Riemann zeta functions."""

from __future__ import annotations

import numpy as np

from specfunpy import gamma, log
from specfunpy.errors import PoleError
from specfunpy.functions import misc
from specfunpy.functions.tables import (
    BERNOULLI,
    coefficients,
    fraction_to_float,
    int_to_float,
)
from specfunpy.precision import STANDARD, Policy

_log = log.numerics_logger(__name__)


def _digamma_1p(z, policy: Policy):
    """ψ(1+z) for |z| <= 1/2.

    Uses ψ(1+z) = -γ + Σ (-1)^k ζ(k) z^(k-1) with the ``ζ(k) = 1`` part
    summed in closed form as ``1 - 1/(1+z)``.
    """

    c = coefficients(policy.dtype)
    total = policy.dtype(0)
    power = z
    for zeta_m1 in c.zeta_minus_one:
        term = zeta_m1 * power
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            break
        power = power * -z
    return -1 / (1 + z) + (1 - c.euler) + total


def _digamma_asymptotic(x, policy: Policy):
    c = coefficients(policy.dtype)
    inverse2 = 1 / (x * x)
    power = inverse2
    total = policy.dtype(0)
    for coefficient in c.digamma:
        term = coefficient * power
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            break
        power = power * inverse2
    return np.log(x) - 0.5 / x - total


def _digamma_positive(x, policy: Policy):
    if x >= policy.asymptotic_threshold:
        return _digamma_asymptotic(x, policy)
    if x < 0.5:
        return _digamma_1p(x, policy) - 1 / x
    if x <= 1.5:
        return _digamma_1p(x - 1, policy)
    # ψ(x) = ψ(x-m) + Σ 1/(x-j); smallest terms first.
    m = int(np.floor(x - 0.5))
    shift = policy.dtype(0)
    for j in range(1, m + 1):
        shift += 1 / (x - j)
    return _digamma_1p(x - m - 1, policy) + shift


def _cot_pi(x, policy: Policy):
    return misc.cospi(x, policy) / misc.sinpi(x, policy)


def _check_pole(function: str, x) -> None:
    if misc.is_pole(x):
        raise PoleError(
            f"{function}: pole at non-positive integer x={x}", function=function
        )


@misc.quiet
def digamma(x, policy: Policy = STANDARD):
    """Digamma function ψ(x) = Γ'(x)/Γ(x).

    Raises
    ------
    PoleError
        At ``x = 0, -1, -2, ...``.
    """

    (x,) = misc.arguments("digamma", policy, x=x)
    _check_pole("digamma", x)
    if x < 0:
        c = coefficients(policy.dtype)
        value = _digamma_positive(1 - x, policy) - c.pi * _cot_pi(x, policy)
    else:
        value = _digamma_positive(x, policy)
    return misc.finite("digamma", value)


def _cot_derivative_polynomial(n: int) -> list[int]:
    """Integer coefficients (ascending) of P_n with d^n/du^n cot(u) = P_n(cot u)."""

    poly = [0, 1]
    for _ in range(n):
        derivative = [k * poly[k] for k in range(1, len(poly))]
        # multiply by -(1 + t^2)
        out = [0] * (len(derivative) + 2)
        for k, value in enumerate(derivative):
            out[k] -= value
            out[k + 2] -= value
        poly = out
    return poly


def _horner(values, t, policy: Policy):
    total = policy.dtype(0)
    for value in reversed(values):
        total = total * t + int_to_float(value, policy.dtype)
    return total


def _polygamma_positive(function: str, n: int, x, policy: Policy):
    """ψ^(n)(x) for n >= 1 and x > 0.

    Written as ``(-1)^(n+1) n!/x^(n+1) * T`` where ``T`` collects the shifted
    terms ``(x/(x+j))^(n+1)`` and the Euler-Maclaurin tail beyond ``y = x + m``.
    """

    c = coefficients(policy.dtype)
    dtype = policy.dtype
    target = policy.asymptotic_threshold + n
    m = max(0, int(np.ceil(target - x)))
    y = x + m

    head = dtype(0)
    for j in range(m - 1, -1, -1):
        head += np.power(x / (x + j), n + 1)

    asymptotic = 1 + n / (2 * y)
    ratio = dtype(n) * (n + 1) / (y * y)
    for k, coefficient in enumerate(c.euler_maclaurin, start=1):
        term = coefficient * ratio
        asymptotic += term
        if abs(term) <= policy.epsilon * abs(asymptotic):
            break
        ratio = ratio * ((n + 2 * k) * (n + 2 * k + 1)) / (y * y)
    total = head + (x / n) * np.power(x / y, n) * asymptotic

    sign = 1 if n % 2 else -1
    if n < len(c.factorials):
        scale = c.factorials[n] / np.power(x, n + 1)
        value = sign * scale * total
        if np.isfinite(value) and value != 0:
            return value
    log_scale = gamma.lgamma(n + 1, policy) - (n + 1) * np.log(x)
    return misc.scaled_exp(function, log_scale, sign * total, policy)


@misc.quiet
def polygamma(n, x, policy: Policy = STANDARD):
    """Polygamma function ψ^(n)(x), the n-th derivative of digamma.

    Parameters
    ----------
    n:
        Non-negative integer order; ``n = 0`` is :func:`digamma`.
    x:
        Any real that is not a non-positive integer.
    policy:
        Precision policy.

    Notes
    -----
    Negative ``x`` uses the reflection
    ``ψ^(n)(x) = (-1)^n ψ^(n)(1-x) - π^(n+1) P_n(cot πx)`` where ``P_n`` is
    the integer polynomial of the n-th derivative of ``cot``.
    """

    function = "polygamma"
    n = misc.order(function, "n", n)
    if n == 0:
        return digamma(x, policy)
    (x,) = misc.arguments(function, policy, x=x)
    _check_pole(function, x)
    if x > 0:
        return misc.finite(function, _polygamma_positive(function, n, x, policy))
    c = coefficients(policy.dtype)
    reflected = _polygamma_positive(function, n, 1 - x, policy)
    if n % 2:
        reflected = -reflected
    cot = _cot_pi(x, policy)
    correction = np.power(c.pi, n + 1) * _horner(
        _cot_derivative_polynomial(n), cot, policy
    )
    return misc.finite(function, reflected - correction)


def trigamma(x, policy: Policy = STANDARD):
    """Trigamma function ψ'(x)."""
    return polygamma(1, x, policy)


def _zeta_euler_maclaurin(function: str, s, policy: Policy):
    c = coefficients(policy.dtype)
    dtype = policy.dtype
    big_n = policy.asymptotic_threshold
    n_value = dtype(big_n)

    head = dtype(0)
    for n in range(big_n - 1, 0, -1):
        head += np.power(dtype(n), -s)
    tail_power = np.power(n_value, -s)
    total = head + n_value * tail_power / (s - 1) + tail_power / 2

    f = s * tail_power / n_value
    for k, coefficient in enumerate(c.euler_maclaurin, start=1):
        term = coefficient * f
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            _log.numerics("%s: converged after %d correction terms", function, k)
            return total
        f = f * ((s + 2 * k - 1) * (s + 2 * k)) / (n_value * n_value)
    raise misc.convergence_failure(function, len(c.euler_maclaurin), total)


@misc.quiet
def riemann_zeta(s, policy: Policy = STANDARD):
    """Riemann zeta function ζ(s) for real s.

    Exact values are returned at ``s = 0`` (-1/2), at the negative even
    integers (the trivial zeros) and at the negative odd integers
    (``-B_(n+1)/(n+1)``).

    Raises
    ------
    PoleError
        At ``s = 1``.
    """

    function = "riemann_zeta"
    (s,) = misc.arguments(function, policy, s=s)
    if s == 1:
        raise PoleError(f"{function}: pole at s=1", function=function)
    if s == 0:
        return policy.dtype(-0.5)
    if s > 0:
        return _zeta_euler_maclaurin(function, s, policy)
    if misc.is_integer(s):
        n = -int(s)
        if n % 2 == 0:
            return policy.dtype(0)
        if n + 1 < len(BERNOULLI):
            exact = -BERNOULLI[n + 1] / (n + 1)
            return misc.finite(function, fraction_to_float(exact, policy.dtype))
    # ζ(s) = 2^s π^(s-1) sin(πs/2) Γ(1-s) ζ(1-s)
    c = coefficients(policy.dtype)
    log_value = s * c.ln2 + (s - 1) * c.log_pi + gamma.lgamma(1 - s, policy)
    factor = misc.sinpi(s / 2, policy) * _zeta_euler_maclaurin(function, 1 - s, policy)
    return misc.scaled_exp(function, log_value, factor, policy)
