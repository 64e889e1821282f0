"""Exact coefficient tables rounded to each working precision.

Every coefficient is held as an exact rational (or integer) and rounded once to
the target floating-point type, so the three precisions share the same tables
up to their own rounding. The tables are immutable and built at import time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction

import numpy as np

# Bits kept when rounding a big integer; enough for any supported mantissa
# while staying below the float32 exponent range.
_GUARD_BITS = 96

_PI = "3.14159265358979323846264338327950288419716939937510"
_EULER = "0.57721566490153286060651209008240243104215933593992"
_LOG_PI = "1.14472988584940017414342735135305871164729481291531"
_LOG_SQRT_TWO_PI = "0.91893853320467274178032973640561763986139747363778"
_SQRT_TWO_PI = "2.50662827463100050241576528481104525300698674060994"
_LN2 = "0.69314718055994530941723212145817656807550013436026"

DTYPES = (np.float32, np.float64, np.longdouble)


def int_to_float(value: int, dtype):
    """Round an exact integer to ``dtype``.

    Parameters
    ----------
    value:
        Arbitrary size Python integer.
    dtype:
        NumPy floating-point scalar type.

    Returns
    -------
    numpy.floating
        The rounded value, ``inf`` when out of range.
    """

    if value == 0:
        return dtype(0)
    magnitude = abs(value)
    shift = max(magnitude.bit_length() - _GUARD_BITS, 0)
    with np.errstate(over="ignore"):
        result = dtype(np.ldexp(dtype(str(magnitude >> shift)), shift))
    return -result if value < 0 else result


def fraction_to_float(value: Fraction, dtype):
    """Round an exact rational to ``dtype``."""

    if value == 0:
        return dtype(0)
    numerator, denominator = abs(value.numerator), value.denominator
    shift = _GUARD_BITS - (numerator.bit_length() - denominator.bit_length())
    if shift >= 0:
        quotient = (numerator << shift) // denominator
    else:
        quotient = numerator // (denominator << -shift)
    with np.errstate(over="ignore", under="ignore"):
        result = dtype(np.ldexp(dtype(str(quotient)), -shift))
    return -result if value < 0 else result


def _bernoulli_numbers(count: int) -> tuple[Fraction, ...]:
    numbers = [Fraction(1)]
    for m in range(1, count + 1):
        total = sum(
            (math.comb(m + 1, k) * numbers[k] for k in range(m)), Fraction(0)
        )
        numbers.append(-total / (m + 1))
    return tuple(numbers)


# B_0 ... B_80
BERNOULLI = _bernoulli_numbers(80)


def _zeta_minus_one(k: int, cut: int = 16, corrections: int = 20) -> Fraction:
    # Euler-Maclaurin with exact rationals; the truncation error is far
    # below the extended-precision epsilon for every k >= 2.
    total = sum((Fraction(1, n**k) for n in range(2, cut)), Fraction(0))
    total += Fraction(1, (k - 1) * cut ** (k - 1)) + Fraction(1, 2 * cut**k)
    rising = k
    for j in range(1, corrections + 1):
        total += (
            BERNOULLI[2 * j]
            / math.factorial(2 * j)
            * Fraction(rising, cut ** (k + 2 * j - 1))
        )
        rising *= (k + 2 * j - 1) * (k + 2 * j)
    return total


# zeta(k) - 1 for k = 2 ... 65
ZETA_MINUS_ONE = tuple(_zeta_minus_one(k) for k in range(2, 66))


def _rounded(values, dtype) -> tuple:
    """Round exact values until the first one that overflows."""
    out = []
    for value in values:
        if isinstance(value, Fraction):
            rounded = fraction_to_float(value, dtype)
        else:
            rounded = int_to_float(value, dtype)
        if not np.isfinite(rounded):
            break
        out.append(rounded)
    return tuple(out)


def _factorials():
    exact, n = 1, 0
    while True:
        yield exact
        n += 1
        exact *= n


def _double_factorials():
    previous, current, n = 1, 1, 1
    yield 1
    while True:
        yield current
        n += 1
        previous, current = current, n * previous


def _take_finite(generator, dtype) -> tuple:
    out = []
    for exact in generator:
        rounded = int_to_float(exact, dtype)
        if not np.isfinite(rounded):
            break
        out.append(rounded)
    return tuple(out)


@dataclass(frozen=True)
class Coefficients:
    """Constants and series coefficients of one floating-point type.

    Attributes
    ----------
    stirling:
        ``B_2k / (2k (2k-1))``, the log-gamma asymptotic series.
    digamma:
        ``B_2k / 2k``, the digamma asymptotic series.
    euler_maclaurin:
        ``B_2k / (2k)!``.
    zeta_minus_one:
        ``zeta(k) - 1`` for ``k = 2, 3, ...``.
    factorials:
        ``n!`` for every ``n`` whose factorial is finite.
    double_factorials:
        ``n!!`` for every ``n`` whose double factorial is finite.
    """

    dtype: type
    pi: np.floating
    two_pi: np.floating
    log_pi: np.floating
    log_sqrt_two_pi: np.floating
    sqrt_two_pi: np.floating
    ln2: np.floating
    euler: np.floating
    stirling: tuple
    digamma: tuple
    euler_maclaurin: tuple
    zeta_minus_one: tuple
    factorials: tuple
    double_factorials: tuple


def _build(dtype) -> Coefficients:
    evens = range(1, len(BERNOULLI) // 2 + 1)
    pi = dtype(_PI)
    return Coefficients(
        dtype=dtype,
        pi=pi,
        two_pi=pi * 2,
        log_pi=dtype(_LOG_PI),
        log_sqrt_two_pi=dtype(_LOG_SQRT_TWO_PI),
        sqrt_two_pi=dtype(_SQRT_TWO_PI),
        ln2=dtype(_LN2),
        euler=dtype(_EULER),
        stirling=_rounded(
            (BERNOULLI[2 * k] / (2 * k * (2 * k - 1)) for k in evens), dtype
        ),
        digamma=_rounded((BERNOULLI[2 * k] / (2 * k) for k in evens), dtype),
        euler_maclaurin=_rounded(
            (BERNOULLI[2 * k] / math.factorial(2 * k) for k in evens), dtype
        ),
        zeta_minus_one=_rounded(ZETA_MINUS_ONE, dtype),
        factorials=_take_finite(_factorials(), dtype),
        double_factorials=_take_finite(_double_factorials(), dtype),
    )


_COEFFICIENTS = {dtype: _build(dtype) for dtype in DTYPES}


def coefficients(dtype) -> Coefficients:
    """Return the coefficient tables of ``dtype``."""
    return _COEFFICIENTS[dtype]
