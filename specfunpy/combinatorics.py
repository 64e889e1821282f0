"""Factorials, Pochhammer symbols and binomial coefficients.

Small arguments read exact tables rounded to the working precision; larger ones
go through the gamma engine so that nothing is formed as a quotient of two
overflowing factorials.
"""

from __future__ import annotations

import numpy as np

from specfunpy import gamma
from specfunpy.errors import ResultOverflowError
from specfunpy.functions import misc
from specfunpy.functions.tables import coefficients
from specfunpy.precision import STANDARD, Policy


def factorial(i, policy: Policy = STANDARD):
    """i! for a non-negative integer ``i``.

    Raises
    ------
    ResultOverflowError
        For ``i > policy.max_factorial``.
    """

    i = misc.order("factorial", "i", i)
    table = coefficients(policy.dtype).factorials
    if i < len(table):
        return table[i]
    return gamma.tgamma(i + 1, policy)


@misc.quiet
def double_factorial(i, policy: Policy = STANDARD):
    """i!! = i (i-2) (i-4) ... down to 1 or 2; ``0!! = 1``."""

    function = "double_factorial"
    i = misc.order(function, "i", i)
    table = coefficients(policy.dtype).double_factorials
    if i < len(table):
        return table[i]
    c = coefficients(policy.dtype)
    half = policy.dtype(i) / 2
    log_value = half * c.ln2 + gamma.lgamma(half + 1, policy)
    if i % 2:
        # i!! = 2^(i/2) Γ(i/2 + 1) sqrt(2/π) for odd i
        log_value += (c.ln2 - c.log_pi) / 2
    return misc.scaled_exp(function, log_value, 1, policy)


@misc.quiet
def rising_factorial(x, i, policy: Policy = STANDARD):
    """Pochhammer symbol ``(x)_i = x (x+1) ... (x+i-1)``.

    Computed as ``1 / tgamma_delta_ratio(x, i)``; negative ``x`` maps to a
    falling factorial of ``-x``.
    """

    function = "rising_factorial"
    i = misc.order(function, "i", i)
    (x,) = misc.arguments(function, policy, x=x)
    if i == 0:
        return policy.dtype(1)
    if x == 0:
        return policy.dtype(0)
    if x < 0:
        value = falling_factorial(-x, i, policy)
        return -value if i % 2 else value
    if x < 1 and gamma.lgamma_delta_ratio(x, i, policy) >= policy.log_max:
        # Γ(x)/Γ(x+i) beyond the range means the product underflows.
        return policy.dtype(0)
    ratio = gamma.tgamma_delta_ratio(x, i, policy)
    if ratio == 0:
        raise ResultOverflowError(
            f"{function}: result is outside the representable range",
            function=function,
        )
    return misc.finite(function, 1 / ratio)


@misc.quiet
def falling_factorial(x, i, policy: Policy = STANDARD):
    """Falling factorial ``x (x-1) ... (x-i+1)``."""

    function = "falling_factorial"
    i = misc.order(function, "i", i)
    (x,) = misc.arguments(function, policy, x=x)
    if i == 0:
        return policy.dtype(1)
    if x < 0:
        value = rising_factorial(-x, i, policy)
        return -value if i % 2 else value
    if x == 0:
        return policy.dtype(0)
    if misc.is_integer(x) and i > x:
        return policy.dtype(0)
    if x - i + 1 > 0:
        return gamma.tgamma_delta_ratio(x + 1, -i, policy)
    # x+1-i <= 0: take the n2 factors down to x-n2+1 > 0 through the gamma
    # ratio, then the factor in (-1, 0), then the rest with negative argument.
    n2 = int(np.floor(x + 1))
    result = gamma.tgamma_delta_ratio(x + 1, -n2, policy)
    x = x - n2
    result = result * x
    n2 += 1
    if n2 < i:
        result = result * falling_factorial(x - 1, i - n2, policy)
    return misc.finite(function, result)


@misc.quiet
def binomial_coefficient(n, k, policy: Policy = STANDARD):
    """Binomial coefficient ``C(n, k)`` for non-negative integers.

    ``k > n`` gives zero. Results up to ``2/epsilon`` are rounded to the
    nearest integer.
    """

    function = "binomial_coefficient"
    n = misc.order(function, "n", n)
    k = misc.order(function, "k", k)
    if k > n:
        return policy.dtype(0)
    if k == 0 or k == n:
        return policy.dtype(1)
    if k == 1 or k == n - 1:
        return misc.finite(function, policy.dtype(n))
    k = min(k, n - k)
    factorials = coefficients(policy.dtype).factorials
    result = policy.dtype(np.inf)
    if k < len(factorials):
        # Γ(n-k+1)/Γ(n+1) <= 1, so this never overflows.
        ratio = gamma.tgamma_delta_ratio(n - k + 1, k, policy)
        product = ratio * factorials[k]
        if product > 0:
            result = 1 / product
    if not np.isfinite(result):
        log_value = -gamma.lgamma_delta_ratio(n - k + 1, k, policy) - gamma.lgamma(
            k + 1, policy
        )
        result = misc.scaled_exp(function, log_value, 1, policy)
    if result < policy.integer_limit:
        result = np.rint(result)
    return result
