"""Gamma engine: complete, logarithmic, ratio and incomplete gamma functions.

Notes
-----
All routines share three building blocks:

* ``log Γ(1+z)`` for ``|z| <= 1/2`` from the series
  ``-log1p(z) + z(1-γ) + Σ (-1)^k (ζ(k)-1) z^k / k``;
* the Stirling correction ``S(x) = Σ B_2k / (2k(2k-1) x^(2k-1))`` above the
  policy's asymptotic threshold;
* recurrences ``Γ(x+1) = x Γ(x)`` to move between the two regions.
"""

from __future__ import annotations

import numpy as np

from specfunpy import log
from specfunpy.errors import DomainError, PoleError, ResultOverflowError
from specfunpy.functions import misc
from specfunpy.functions.tables import coefficients
from specfunpy.precision import STANDARD, Policy

_log = log.numerics_logger(__name__)

# Integer deltas up to this size use a direct product in the ratio functions.
_MAX_PRODUCT_TERMS = 50

# The incomplete gamma iteration cap grows once sqrt(a) passes this value.
_BUDGET_SCALE = 100


def _lgamma1p(z, policy: Policy):
    """log Γ(1+z) for |z| <= 1/2."""

    c = coefficients(policy.dtype)
    total = -np.log1p(z) + z * (1 - c.euler)
    power = -z
    for k, zeta_m1 in enumerate(c.zeta_minus_one, start=2):
        power = power * -z
        term = zeta_m1 * power / k
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            break
    return total


def _stirling_series(x, policy: Policy):
    c = coefficients(policy.dtype)
    inverse = 1 / x
    inverse2 = inverse * inverse
    power = inverse
    total = policy.dtype(0)
    for coefficient in c.stirling:
        term = coefficient * power
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            break
        power = power * inverse2
    return total


def _lgamma_stirling(x, policy: Policy):
    c = coefficients(policy.dtype)
    return (x - 0.5) * np.log(x) - x + c.log_sqrt_two_pi + _stirling_series(x, policy)


def _lgamma_positive(x, policy: Policy):
    """log Γ(x) for x > 0."""

    if x >= policy.asymptotic_threshold:
        return _lgamma_stirling(x, policy)
    if x < 0.5:
        return _lgamma1p(x, policy) - np.log(x)
    if x <= 1.5:
        return _lgamma1p(x - 1, policy)
    # Shift down into [1.5, 2.5) where log Γ(y) = log1p(y-2) + log Γ(1+(y-2))
    # keeps full relative accuracy around the root at 2.
    m = int(np.floor(x - 1.5))
    product = policy.dtype(1)
    y = x
    for _ in range(m):
        y = y - 1
        product = product * y
    z = y - 2
    return np.log(product) + np.log1p(z) + _lgamma1p(z, policy)


def _tgamma_positive(x, policy: Policy):
    """Γ(x) for x > 0; may return inf."""

    c = coefficients(policy.dtype)
    if x == np.floor(x) and x <= len(c.factorials):
        return c.factorials[int(x) - 1]
    if x >= policy.asymptotic_threshold:
        # Γ(x) = sqrt(2π) x^(x-1/2) e^-x e^S(x), with the power split in two
        # halves so the intermediate stays finite whenever the result is.
        half = np.power(x, (x - 0.5) / 2)
        return c.sqrt_two_pi * half * (half * np.exp(-x)) * np.exp(
            _stirling_series(x, policy)
        )
    if x < 0.5:
        return np.exp(_lgamma1p(x, policy)) / x
    if x <= 1.5:
        return np.exp(_lgamma1p(x - 1, policy))
    m = int(np.floor(x - 0.5))
    product = policy.dtype(1)
    y = x
    for _ in range(m):
        y = y - 1
        product = product * y
    return product * np.exp(_lgamma1p(y - 1, policy))


def _sign(x, policy: Policy) -> int:
    """Sign of Γ(x) away from the poles."""

    if x > 0:
        return 1
    return 1 if misc.sinpi(x, policy) > 0 else -1


def _tgamma_negative(x, policy: Policy):
    """Γ(x) for negative non-integer x; may return inf or a signed zero."""

    c = coefficients(policy.dtype)
    if x > -policy.asymptotic_threshold:
        m = int(np.ceil(0.5 - x))
        denominator = policy.dtype(1)
        y = x
        for _ in range(m):
            denominator = denominator * y
            y = y + 1
        return _tgamma_positive(y, policy) / denominator
    s = misc.sinpi(x, policy)
    reflected = _tgamma_positive(1 - x, policy)
    if np.isfinite(reflected):
        return c.pi / (s * reflected)
    log_magnitude = c.log_pi - np.log(abs(s)) - _lgamma_positive(1 - x, policy)
    if log_magnitude < policy.log_min:
        return np.copysign(policy.dtype(0), s)
    return np.copysign(np.exp(log_magnitude), s)


def _lgamma_any(x, policy: Policy):
    """log|Γ(x)| for any non-pole x."""

    if x > 0:
        return _lgamma_positive(x, policy)
    c = coefficients(policy.dtype)
    if x > -policy.asymptotic_threshold:
        m = int(np.ceil(0.5 - x))
        denominator = policy.dtype(1)
        y = x
        for _ in range(m):
            denominator = denominator * y
            y = y + 1
        return _lgamma_positive(y, policy) - np.log(abs(denominator))
    return (
        c.log_pi
        - np.log(abs(misc.sinpi(x, policy)))
        - _lgamma_positive(1 - x, policy)
    )


def _tgamma_any(x, policy: Policy):
    if x > 0:
        return _tgamma_positive(x, policy)
    return _tgamma_negative(x, policy)


def _check_pole(function: str, name: str, x) -> None:
    if misc.is_pole(x):
        raise PoleError(
            f"{function}: pole at non-positive integer {name}={x}", function=function
        )


@misc.quiet
def tgamma(x, policy: Policy = STANDARD):
    """Gamma function Γ(x).

    Parameters
    ----------
    x:
        Any real that is not a non-positive integer.
    policy:
        Precision policy.

    Returns
    -------
    numpy.floating
        Γ(x) in ``policy.dtype``.

    Raises
    ------
    PoleError
        At ``x = 0, -1, -2, ...``.
    ResultOverflowError
        When Γ(x) exceeds the overflow ceiling.
    """

    (x,) = misc.arguments("tgamma", policy, x=x)
    _check_pole("tgamma", "x", x)
    return misc.finite("tgamma", _tgamma_any(x, policy))


@misc.quiet
def lgamma(x, policy: Policy = STANDARD):
    """Logarithm of the absolute value of the gamma function, log|Γ(x)|."""

    (x,) = misc.arguments("lgamma", policy, x=x)
    _check_pole("lgamma", "x", x)
    return misc.finite("lgamma", _lgamma_any(x, policy))


def _log_delta_ratio_large(z, delta, policy: Policy):
    """log(Γ(z)/Γ(z+δ)) with z and z+δ in the Stirling range."""

    w = z + delta
    difference = (
        delta * np.log(z)
        + (w - 0.5) * np.log1p(delta / z)
        - delta
        + _stirling_series(w, policy)
        - _stirling_series(z, policy)
    )
    return -difference


def _shift_into_stirling(a, b, policy: Policy):
    """Shift a and b up by the same m.

    Returns ``(a+m, factor, log_scale)`` with
    ``Π (b+j)/(a+j) = factor * exp(log_scale)``. Whenever the running product
    would leave the normal range it is folded into ``log_scale``, so tiny
    ``a`` or ``b`` never overflow the factor.
    """

    m = int(np.ceil(policy.asymptotic_threshold - min(a, b)))
    factor = policy.dtype(1)
    log_scale = policy.dtype(0)
    for j in range(m):
        product = factor * ((b + j) / (a + j))
        if policy.underflow_floor < product < policy.overflow_ceiling:
            factor = product
            continue
        log_scale += np.log(factor) + (np.log(b + j) - np.log(a + j))
        factor = policy.dtype(1)
    return a + m, factor, log_scale


def _positive_delta_ratio(function: str, a, delta, policy: Policy):
    """Γ(a)/Γ(a+δ) for a > 0 and a+δ > 0."""

    b = a + delta
    threshold = policy.asymptotic_threshold
    if a >= threshold and b >= threshold:
        return misc.scaled_exp(
            function, _log_delta_ratio_large(a, delta, policy), 1, policy
        )
    if a < threshold and b < threshold:
        ga = _tgamma_positive(a, policy)
        gb = _tgamma_positive(b, policy)
        if np.isfinite(ga) and np.isfinite(gb):
            return misc.finite(function, ga / gb)
    shifted, factor, log_scale = _shift_into_stirling(a, b, policy)
    log_ratio = _log_delta_ratio_large(shifted, delta, policy) + log_scale
    return misc.scaled_exp(function, log_ratio, factor, policy)


def _signed_ratio(function: str, a, b, policy: Policy):
    """Γ(a)/Γ(b) when a negative argument is involved."""

    threshold = policy.asymptotic_threshold
    if abs(a) < threshold and abs(b) < threshold:
        ga = _tgamma_any(a, policy)
        gb = _tgamma_any(b, policy)
        if np.isfinite(ga) and np.isfinite(gb) and gb != 0:
            return misc.finite(function, ga / gb)
    log_ratio = _lgamma_any(a, policy) - _lgamma_any(b, policy)
    sign = _sign(a, policy) * _sign(b, policy)
    return misc.scaled_exp(function, log_ratio, sign, policy)


def _integer_delta_ratio(function: str, a, n: int, policy: Policy):
    """Γ(a)/Γ(a+n) for a small integer n, as a direct product."""

    product = policy.dtype(1)
    if n > 0:
        for j in range(n):
            product = product * (a + j)
        if not np.isfinite(product):
            return np.copysign(policy.dtype(0), product)
        return misc.finite(function, 1 / product)
    for j in range(1, -n + 1):
        product = product * (a - j)
    return misc.finite(function, product)


@misc.quiet
def tgamma_delta_ratio(a, delta, policy: Policy = STANDARD):
    """Ratio Γ(a)/Γ(a+δ).

    Notes
    -----
    δ is used as given rather than through the rounded sum ``a+δ``, so small
    increments on large ``a`` keep full relative accuracy. Γ(a) and Γ(a+δ) are
    never formed separately when either argument is large.
    """

    function = "tgamma_delta_ratio"
    a, delta = misc.arguments(function, policy, a=a, delta=delta)
    _check_pole(function, "a", a)
    _check_pole(function, "a+delta", a + delta)
    if delta == 0:
        return policy.dtype(1)
    if misc.is_integer(delta) and abs(delta) <= _MAX_PRODUCT_TERMS:
        return _integer_delta_ratio(function, a, int(delta), policy)
    if a > 0 and a + delta > 0:
        return _positive_delta_ratio(function, a, delta, policy)
    return _signed_ratio(function, a, a + delta, policy)


@misc.quiet
def tgamma_ratio(a, b, policy: Policy = STANDARD):
    """Ratio Γ(a)/Γ(b) without intermediate overflow."""

    function = "tgamma_ratio"
    a, b = misc.arguments(function, policy, a=a, b=b)
    _check_pole(function, "a", a)
    _check_pole(function, "b", b)
    if a == b:
        return policy.dtype(1)
    if a <= 0 or b <= 0:
        return _signed_ratio(function, a, b, policy)
    threshold = policy.asymptotic_threshold
    if a < threshold and b < threshold:
        ga = _tgamma_positive(a, policy)
        gb = _tgamma_positive(b, policy)
        if np.isfinite(ga) and np.isfinite(gb):
            return misc.finite(function, ga / gb)
    if 0.5 <= a / b <= 2:
        # b - a is exact here.
        return _positive_delta_ratio(function, a, b - a, policy)
    log_ratio = _lgamma_positive(a, policy) - _lgamma_positive(b, policy)
    return misc.scaled_exp(function, log_ratio, 1, policy)


@misc.quiet
def lgamma_delta_ratio(a, delta, policy: Policy = STANDARD):
    """log(Γ(a)/Γ(a+δ)) for a > 0 and a+δ > 0."""

    function = "lgamma_delta_ratio"
    a, delta = misc.arguments(function, policy, a=a, delta=delta)
    b = a + delta
    if a <= 0 or b <= 0:
        raise DomainError(
            f"{function}: requires a > 0 and a+delta > 0, got a={a}, delta={delta}",
            function=function,
        )
    if delta == 0:
        return policy.dtype(0)
    threshold = policy.asymptotic_threshold
    if a >= threshold and b >= threshold:
        return _log_delta_ratio_large(a, delta, policy)
    if a < threshold and b < threshold:
        return _lgamma_positive(a, policy) - _lgamma_positive(b, policy)
    shifted, factor, log_scale = _shift_into_stirling(a, b, policy)
    return np.log(factor) + log_scale + _log_delta_ratio_large(shifted, delta, policy)


# Incomplete gamma functions


def _incomplete_arguments(function: str, a, x, policy: Policy):
    a, x = misc.arguments(function, policy, a=a, x=x)
    if a <= 0:
        raise DomainError(f"{function}: requires a > 0, got a={a}", function=function)
    if x < 0:
        raise DomainError(f"{function}: requires x >= 0, got x={x}", function=function)
    return a, x


def _regularised_prefix(a, x, policy: Policy):
    """x^a e^-x / Γ(a)."""

    c = coefficients(policy.dtype)
    if a >= policy.asymptotic_threshold:
        d = (x - a) / a
        log_prefix = (
            a * misc.log1pmx(d, policy)
            + 0.5 * np.log(a / c.two_pi)
            - _stirling_series(a, policy)
        )
        return np.exp(log_prefix)
    power = np.power(x, a)
    decay = np.exp(-x)
    gamma_a = _tgamma_positive(a, policy)
    if np.isfinite(power) and power > 0 and decay > 0 and np.isfinite(gamma_a):
        prefix = (power / gamma_a) * decay
        if prefix > 0 and np.isfinite(prefix):
            return prefix
    return np.exp(a * np.log(x) - x - _lgamma_positive(a, policy))


def _iteration_budget(a, policy: Policy) -> int:
    """Iteration cap of the series and continued fraction at shape ``a``.

    Near ``x = a`` both need about ``sqrt(2 a log(1/epsilon))`` terms, so the
    policy's cap is multiplied by ``ceil(sqrt(a) / _BUDGET_SCALE)``.
    """

    return policy.max_iterations * max(1, int(np.ceil(np.sqrt(a) / _BUDGET_SCALE)))


def _lower_series(function: str, a, x, policy: Policy):
    """Σ_{n>=0} x^n / ((a+1)...(a+n))."""

    budget = _iteration_budget(a, policy)
    term = policy.dtype(1)
    total = policy.dtype(1)
    denominator = a
    for iteration in range(1, budget + 1):
        denominator = denominator + 1
        term = term * (x / denominator)
        total += term
        if abs(term) <= policy.epsilon * abs(total):
            _log.numerics("%s: series converged after %d terms", function, iteration)
            return total
    raise misc.convergence_failure(function, budget, total)


def _upper_fraction(function: str, a, x, policy: Policy):
    """Continued fraction for Γ(a,x) e^x x^-a (modified Lentz)."""

    budget = _iteration_budget(a, policy)
    tiny = policy.underflow_floor / policy.epsilon
    b = x + 1 - a
    c = 1 / tiny
    d = 1 / b
    h = d
    for i in range(1, budget + 1):
        an = -i * (i - a)
        b = b + 2
        d = an * d + b
        if abs(d) < tiny:
            d = tiny
        c = b + an / c
        if abs(c) < tiny:
            c = tiny
        d = 1 / d
        step = d * c
        h = h * step
        if abs(step - 1) <= policy.epsilon:
            _log.numerics(
                "%s: continued fraction converged after %d terms", function, i
            )
            return h
    raise misc.convergence_failure(function, budget, h)


def _tgamma1pm1(a, policy: Policy):
    """Γ(1+a) - 1 for 0 < a < 1 without cancellation."""

    if a <= 0.5:
        return np.expm1(_lgamma1p(a, policy))
    # Γ(1+a) = Γ(2+z) = (1+z) Γ(1+z) with z = a-1 exact.
    z = a - 1
    return np.expm1(np.log1p(z) + _lgamma1p(z, policy))


def _upper_is_smaller(a, x) -> bool:
    """For a < 1 and x < 1.1: whether Q(a, x) is the tail to sum directly."""

    if x < 0.5:
        return bool(a <= -0.4 / np.log(x))
    return bool(a <= 0.75 * x)


def _small_upper(function: str, a, x, policy: Policy):
    """Γ(a, x) and Γ(1+a) for a < 1 and x < 1.1.

    Uses ``Γ(a, x) = (Γ(1+a) - x^a)/a - x^a Σ_{k>=1} (-x)^k / (k! (a+k))``
    with both ``Γ(1+a) - 1`` and ``x^a - 1`` formed directly, so nothing is
    taken as the difference of Γ(a) and γ(a, x).
    """

    gamma1pm1 = _tgamma1pm1(a, policy)
    powm1 = np.expm1(a * np.log(x))
    head = (gamma1pm1 - powm1) / a
    power = powm1 + 1
    term = policy.dtype(1)
    total = policy.dtype(0)
    for k in range(1, policy.max_iterations + 1):
        term = term * (-x / k)
        contribution = term / (a + k)
        total += contribution
        if abs(contribution) <= policy.epsilon * abs(total):
            _log.numerics("%s: small-a series converged after %d terms", function, k)
            return head - power * total, gamma1pm1 + 1
    raise misc.convergence_failure(function, policy.max_iterations, total)


def _incomplete(function: str, a, x, policy: Policy, *, normalised: bool, upper: bool):
    if x == 0:
        if not upper:
            return policy.dtype(0)
        return policy.dtype(1) if normalised else misc.finite(
            function, _tgamma_positive(a, policy)
        )
    if a < 1 and x < 1.1 and (upper or normalised) and _upper_is_smaller(a, x):
        tail, gamma1p = _small_upper(function, a, x, policy)
        if not normalised:
            return misc.finite(function, tail)
        # Q = Γ(a, x) / Γ(a) = a Γ(a, x) / Γ(1+a), finite even for tiny a.
        q = tail / gamma1p * a
        return q if upper else 1 - q
    if x < a + 1:
        series = _lower_series(function, a, x, policy)
        if normalised:
            lower = _regularised_prefix(a, x, policy) * series / a
            return 1 - lower if upper else lower
        lower = misc.scaled_exp(function, a * np.log(x) - x, series / a, policy)
        if not upper:
            return lower
        return misc.finite(function, _tgamma_positive(a, policy) - lower)
    fraction = _upper_fraction(function, a, x, policy)
    if normalised:
        tail = _regularised_prefix(a, x, policy) * fraction
        return tail if upper else 1 - tail
    tail = misc.scaled_exp(function, a * np.log(x) - x, fraction, policy)
    if upper:
        return tail
    return misc.finite(function, _tgamma_positive(a, policy) - tail)


@misc.quiet
def gamma_p(a, x, policy: Policy = STANDARD):
    """Regularised lower incomplete gamma P(a, x) = γ(a, x) / Γ(a)."""

    a, x = _incomplete_arguments("gamma_p", a, x, policy)
    return _incomplete("gamma_p", a, x, policy, normalised=True, upper=False)


@misc.quiet
def gamma_q(a, x, policy: Policy = STANDARD):
    """Regularised upper incomplete gamma Q(a, x) = 1 - P(a, x)."""

    a, x = _incomplete_arguments("gamma_q", a, x, policy)
    return _incomplete("gamma_q", a, x, policy, normalised=True, upper=True)


@misc.quiet
def tgamma_lower(a, x, policy: Policy = STANDARD):
    """Lower incomplete gamma γ(a, x)."""

    a, x = _incomplete_arguments("tgamma_lower", a, x, policy)
    return _incomplete("tgamma_lower", a, x, policy, normalised=False, upper=False)


@misc.quiet
def tgamma_upper(a, x, policy: Policy = STANDARD):
    """Upper incomplete gamma Γ(a, x)."""

    a, x = _incomplete_arguments("tgamma_upper", a, x, policy)
    return _incomplete("tgamma_upper", a, x, policy, normalised=False, upper=True)


def _p_derivative(function: str, a, x, policy: Policy):
    if x == 0:
        if a > 1:
            return policy.dtype(0)
        if a == 1:
            return policy.dtype(1)
        raise ResultOverflowError(
            f"{function}: derivative is infinite at x=0 for a < 1", function=function
        )
    value = _regularised_prefix(a, x, policy) / x
    if np.isfinite(value):
        return value
    log_value = (a - 1) * np.log(x) - x - _lgamma_positive(a, policy)
    return misc.scaled_exp(function, log_value, 1, policy)


@misc.quiet
def gamma_p_derivative(a, x, policy: Policy = STANDARD):
    """Derivative of P(a, x) with respect to x: x^(a-1) e^-x / Γ(a)."""

    a, x = _incomplete_arguments("gamma_p_derivative", a, x, policy)
    return _p_derivative("gamma_p_derivative", a, x, policy)


def _initial_guess(a, p, q, policy: Policy):
    """Starting point for the inverse (Wilson-Hilferty or small-a form)."""

    dtype = policy.dtype
    if a > 1:
        tail = p if p < 0.5 else q
        t = np.sqrt(-2 * np.log(tail))
        z = (2.30753 + t * 0.27061) / (1 + t * (0.99229 + t * 0.04481)) - t
        if p < 0.5:
            z = -z
        root = 1 - 1 / (9 * a) - z / (3 * np.sqrt(a))
        return max(dtype(1e-3), a * root * root * root)
    t = 1 - a * (0.253 + a * 0.12)
    if p < t:
        return np.power(p / t, 1 / a)
    return 1 - np.log(q / (1 - t))


def _invert(function: str, a, p, q, policy: Policy, *, from_upper: bool):
    dtype = policy.dtype
    x = dtype(_initial_guess(a, p, q, policy))
    if not x > 0:
        x = policy.underflow_floor
    low, high = dtype(0), dtype(np.inf)
    tolerance = 4 * policy.epsilon
    for iteration in range(1, policy.max_root_iterations + 1):
        if from_upper:
            residual = q - _incomplete(
                function, a, x, policy, normalised=True, upper=True
            )
        else:
            residual = (
                _incomplete(function, a, x, policy, normalised=True, upper=False) - p
            )
        if residual == 0:
            return x
        if residual < 0:
            low = x
        else:
            high = x
            if x <= policy.underflow_floor:
                # The root lies below the smallest normal value.
                _log.numerics("%s: root underflows after %d iterations", function, iteration)
                return dtype(0)
        derivative = _p_derivative(function, a, x, policy)
        candidate = dtype(np.nan)
        if derivative > 0 and np.isfinite(derivative):
            u = residual / derivative
            # Halley correction from P''/P' = (a-1)/x - 1.
            correction = 1 - 0.5 * min(dtype(1), u * ((a - 1) / x - 1))
            candidate = x - u / correction
        if not (low < candidate < high):
            candidate = (low + high) / 2 if np.isfinite(high) else 2 * x
        if abs(candidate - x) <= tolerance * abs(candidate) or (
            high - low <= tolerance * abs(candidate)
        ):
            _log.numerics("%s converged after %d iterations", function, iteration)
            return candidate
        x = candidate
    raise misc.convergence_failure(function, policy.max_root_iterations, x)


def _probability(function: str, name: str, value) -> None:
    if value < 0 or value > 1:
        raise DomainError(
            f"{function}: requires 0 <= {name} <= 1, got {name}={value}",
            function=function,
        )


@misc.quiet
def gamma_p_inv(a, p, policy: Policy = STANDARD):
    """Inverse of P(a, x) with respect to x.

    Raises
    ------
    ResultOverflowError
        For ``p == 1`` (the root is at infinity).
    ConvergenceError
        When the root finder exhausts ``policy.max_root_iterations``.
    """

    function = "gamma_p_inv"
    a, p = misc.arguments(function, policy, a=a, p=p)
    if a <= 0:
        raise DomainError(f"{function}: requires a > 0, got a={a}", function=function)
    _probability(function, "p", p)
    if p == 0:
        return policy.dtype(0)
    if p == 1:
        raise ResultOverflowError(f"{function}: root is infinite for p=1", function=function)
    return _invert(function, a, p, 1 - p, policy, from_upper=False)


@misc.quiet
def gamma_q_inv(a, q, policy: Policy = STANDARD):
    """Inverse of Q(a, x) with respect to x."""

    function = "gamma_q_inv"
    a, q = misc.arguments(function, policy, a=a, q=q)
    if a <= 0:
        raise DomainError(f"{function}: requires a > 0, got a={a}", function=function)
    _probability(function, "q", q)
    if q == 1:
        return policy.dtype(0)
    if q == 0:
        raise ResultOverflowError(f"{function}: root is infinite for q=0", function=function)
    return _invert(function, a, 1 - q, q, policy, from_upper=True)
