import math

import numpy as np
import numpy.testing as npt
import pytest
from scipy import special

from specfunpy import combinatorics
from specfunpy.errors import DomainError, ResultOverflowError
from specfunpy.precision import EXTENDED, REDUCED


def test_factorial_table():
    assert combinatorics.factorial(0) == 1
    assert combinatorics.factorial(1) == 1
    assert combinatorics.factorial(10) == 3628800
    assert combinatorics.factorial(25) == float(math.factorial(25))
    npt.assert_allclose(combinatorics.factorial(170), float(math.factorial(170)), rtol=1e-15)


def test_factorial_overflow():
    with pytest.raises(ResultOverflowError):
        combinatorics.factorial(171)
    with pytest.raises(ResultOverflowError):
        combinatorics.factorial(35, REDUCED)


def test_factorial_rejects_non_integers():
    with pytest.raises(DomainError):
        combinatorics.factorial(-1)
    with pytest.raises(DomainError):
        combinatorics.factorial(2.0)


@pytest.mark.parametrize("i", [0, 1, 2, 5, 6, 20, 33, 100, 299, 300])
def test_double_factorial(i):
    npt.assert_allclose(
        combinatorics.double_factorial(i), float(special.factorial2(i, exact=True)), rtol=1e-14
    )


def test_double_factorial_small_values():
    assert combinatorics.double_factorial(0) == 1
    assert combinatorics.double_factorial(5) == 15
    assert combinatorics.double_factorial(8) == 384


def test_double_factorial_overflow():
    with pytest.raises(ResultOverflowError):
        combinatorics.double_factorial(400)


@pytest.mark.parametrize("x,i", [(0.5, 3), (2.0, 5), (3.25, 10), (120.5, 60), (1e-3, 2), (7.0, 0)])
def test_rising_factorial(x, i):
    npt.assert_allclose(combinatorics.rising_factorial(x, i), special.poch(x, i), rtol=1e-12)


@pytest.mark.parametrize("x,i", [(-2.5, 3), (-3.0, 2), (-3.0, 5), (-0.5, 4)])
def test_rising_factorial_negative(x, i):
    expected = math.prod(x + k for k in range(i))
    npt.assert_allclose(combinatorics.rising_factorial(x, i), expected, rtol=1e-14, atol=1e-300)


def test_rising_factorial_zero():
    assert combinatorics.rising_factorial(0.0, 4) == 0
    assert combinatorics.rising_factorial(0.0, 0) == 1


@pytest.mark.parametrize("x,i", [(1e-300, 60), (1e-200, 120), (1e-30, 80)])
def test_rising_factorial_tiny_x(x, i):
    # (x)_i = x (x+1) ... (x+i-1) = x (i-1)! to working precision.
    npt.assert_allclose(
        combinatorics.rising_factorial(x, i), x * float(math.factorial(i - 1)), rtol=1e-12
    )


def test_rising_factorial_underflow_flushes_to_zero():
    # (x)_2 = x (x+1) is below the smallest normal double.
    assert combinatorics.rising_factorial(1e-310, 2) == 0


def test_rising_factorial_overflow():
    with pytest.raises(ResultOverflowError):
        combinatorics.rising_factorial(100.0, 200)


@pytest.mark.parametrize(
    "x,i", [(5.0, 3), (5.0, 5), (10.5, 4), (3.5, 6), (-2.0, 3), (80.25, 30), (4.0, 0)]
)
def test_falling_factorial(x, i):
    expected = math.prod(x - k for k in range(i))
    npt.assert_allclose(combinatorics.falling_factorial(x, i), expected, rtol=1e-13)


def test_falling_factorial_integer_zero():
    assert combinatorics.falling_factorial(4.0, 5) == 0
    assert combinatorics.falling_factorial(4.0, 9) == 0
    assert combinatorics.falling_factorial(0.0, 1) == 0


@pytest.mark.parametrize("n,k", [(5, 2), (10, 3), (20, 10), (1000, 3)])
def test_binomial_coefficient_exact(n, k):
    assert combinatorics.binomial_coefficient(n, k) == float(math.comb(n, k))


@pytest.mark.parametrize("n,k", [(52, 26), (60, 30), (500, 250), (1000, 400), (100, 70)])
def test_binomial_coefficient_large(n, k):
    npt.assert_allclose(combinatorics.binomial_coefficient(n, k), float(math.comb(n, k)), rtol=1e-11)


def test_binomial_coefficient_edges():
    for n in (0, 1, 7, 40):
        assert combinatorics.binomial_coefficient(n, 0) == 1
        assert combinatorics.binomial_coefficient(n, n) == 1
    assert combinatorics.binomial_coefficient(3, 5) == 0
    assert combinatorics.binomial_coefficient(9, 1) == 9
    assert combinatorics.binomial_coefficient(9, 8) == 9
    with pytest.raises(ResultOverflowError):
        combinatorics.binomial_coefficient(2000, 1000)


def test_binomial_reduced_width():
    value = combinatorics.binomial_coefficient(20, 10, REDUCED)
    assert isinstance(value, np.float32)
    assert value == 184756


@pytest.mark.skipif(
    np.finfo(np.longdouble).max <= np.finfo(np.float64).max,
    reason="longdouble has the range of float64 on this platform",
)
def test_extended_factorial_beyond_double_range():
    value = combinatorics.factorial(171, EXTENDED)
    assert isinstance(value, np.longdouble)
    npt.assert_allclose(value, 171 * combinatorics.factorial(170, EXTENDED), rtol=1e-17)
