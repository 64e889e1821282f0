import math

import numpy as np
import numpy.testing as npt
import pytest
from scipy import special

from specfunpy import gamma
from specfunpy.errors import (
    ConvergenceError,
    DomainError,
    PoleError,
    ResultOverflowError,
)
from specfunpy.precision import EXTENDED, REDUCED, STANDARD, get_policy

POINTS = [0.001, 0.1, 0.5, 1.0, 1.5, 2.0, 2.5, 3.7, 7.25, 19.5, 20.5, 55.0, 120.3, 170.5]
NEGATIVE = [-0.5, -1.5, -2.25, -10.1, -19.7, -25.5, -100.3]


@pytest.mark.parametrize("x", POINTS + NEGATIVE)
def test_tgamma_matches_scipy(x):
    npt.assert_allclose(gamma.tgamma(x), special.gamma(x), rtol=2e-14)


@pytest.mark.parametrize("x", POINTS + NEGATIVE)
def test_lgamma_matches_scipy(x):
    npt.assert_allclose(gamma.lgamma(x), special.gammaln(x), rtol=1e-14, atol=1e-15)


def test_lgamma_roots_are_exact_enough():
    assert abs(gamma.lgamma(1.0)) <= 1e-16
    assert abs(gamma.lgamma(2.0)) <= 1e-16
    npt.assert_allclose(gamma.lgamma(2.0 + 1e-9), special.gammaln(2.0 + 1e-9), rtol=1e-9)


def test_tgamma_integers_are_factorials():
    for n in range(1, 30):
        assert gamma.tgamma(float(n)) == float(math.factorial(n - 1))


def test_tgamma_half():
    npt.assert_allclose(gamma.tgamma(0.5), np.sqrt(np.pi), rtol=1e-15)


@pytest.mark.parametrize("x", [0.0, -0.0, -1.0, -2.0, -171.0])
def test_tgamma_poles(x):
    with pytest.raises(PoleError):
        gamma.tgamma(x)
    with pytest.raises(PoleError):
        gamma.lgamma(x)


@pytest.mark.parametrize("x", [np.nan, np.inf, -np.inf])
def test_non_finite_arguments(x):
    with pytest.raises(DomainError):
        gamma.tgamma(x)


def test_tgamma_overflow_and_underflow():
    with pytest.raises(ResultOverflowError):
        gamma.tgamma(172.0)
    with pytest.raises(ResultOverflowError):
        gamma.tgamma(36.0, REDUCED)
    assert np.isfinite(gamma.lgamma(172.0))

    tiny = gamma.tgamma(-200.5)
    assert tiny == 0
    assert np.signbit(tiny)


def test_reduced_width():
    value = gamma.tgamma(4.5, REDUCED)
    assert isinstance(value, np.float32)
    npt.assert_allclose(value, special.gamma(4.5), rtol=2e-6)
    npt.assert_allclose(gamma.lgamma(30.5, REDUCED), special.gammaln(30.5), rtol=2e-6)


def test_extended_width():
    value = gamma.tgamma(0.5, EXTENDED)
    assert isinstance(value, np.longdouble)
    npt.assert_allclose(float(value * value), np.pi, rtol=1e-15)
    npt.assert_allclose(float(gamma.lgamma(1000.25, EXTENDED)), special.gammaln(1000.25), rtol=1e-14)


@pytest.mark.parametrize(
    "a,delta",
    [(0.5, 0.5), (3.0, 2.0), (10.0, -3.0), (5.5, 0.25), (200.0, 0.5), (1e5, 1e-3), (30.0, 100.0)],
)
def test_tgamma_delta_ratio(a, delta):
    expected = 1 / special.poch(a, delta)
    npt.assert_allclose(gamma.tgamma_delta_ratio(a, delta), expected, rtol=1e-12)


def test_tgamma_delta_ratio_negative_arguments():
    expected = special.gamma(-2.5) / special.gamma(-0.5)
    npt.assert_allclose(gamma.tgamma_delta_ratio(-2.5, 2.0), expected, rtol=1e-14)
    expected = special.gamma(-1.25) / special.gamma(0.5)
    npt.assert_allclose(gamma.tgamma_delta_ratio(-1.25, 1.75), expected, rtol=1e-14)
    with pytest.raises(PoleError):
        gamma.tgamma_delta_ratio(1.5, -2.5)


def test_tgamma_delta_ratio_identity_and_underflow():
    assert gamma.tgamma_delta_ratio(7.3, 0.0) == 1
    # Γ(10)/Γ(10+400) is far below the smallest normal double.
    assert gamma.tgamma_delta_ratio(10.0, 400.0) == 0


def test_tgamma_delta_ratio_tiny_argument():
    # Γ(a) = 1/a to working precision, so Γ(a)/Γ(a+60) = 1/(a 59!).
    expected = 1 / (1e-300 * float(math.factorial(59)))
    npt.assert_allclose(gamma.tgamma_delta_ratio(1e-300, 60.0), expected, rtol=1e-12)
    npt.assert_allclose(gamma.lgamma_delta_ratio(1e-300, 60.0), np.log(expected), rtol=1e-14)


def test_tgamma_delta_ratio_tiny_argument_reduced():
    a = np.float32(1e-30)
    value = gamma.tgamma_delta_ratio(a, 25.5, REDUCED)
    assert isinstance(value, np.float32)
    npt.assert_allclose(value, 1 / (float(a) * special.gamma(25.5)), rtol=5e-5)


@pytest.mark.parametrize("a,b", [(5.0, 3.0), (0.3, 2.7), (200.0, 100.0), (150.5, 160.25), (-1.5, 2.5)])
def test_tgamma_ratio(a, b):
    expected = np.exp(special.gammaln(a) - special.gammaln(b)) * np.sign(
        special.gamma(a) * special.gamma(b)
    )
    npt.assert_allclose(gamma.tgamma_ratio(a, b), expected, rtol=1e-12)


def test_tgamma_ratio_overflow():
    with pytest.raises(ResultOverflowError):
        gamma.tgamma_ratio(400.0, 1.0)


@pytest.mark.parametrize("a,delta", [(1.0, 0.5), (20.0, 3.0), (2e4, 0.125), (0.25, 100.0)])
def test_lgamma_delta_ratio(a, delta):
    expected = -np.log(special.poch(a, delta))
    npt.assert_allclose(gamma.lgamma_delta_ratio(a, delta), expected, rtol=1e-12)


def test_lgamma_delta_ratio_domain():
    with pytest.raises(DomainError):
        gamma.lgamma_delta_ratio(-0.5, 1.0)
    with pytest.raises(DomainError):
        gamma.lgamma_delta_ratio(1.0, -2.0)


INCOMPLETE = [
    (0.5, 0.3),
    (1.0, 1.0),
    (2.0, 0.5),
    (2.0, 5.0),
    (5.0, 10.0),
    (10.0, 3.0),
    (30.0, 25.0),
    (30.0, 40.0),
    (100.0, 90.0),
]


@pytest.mark.parametrize("a,x", INCOMPLETE)
def test_regularised_incomplete_gamma(a, x):
    npt.assert_allclose(gamma.gamma_p(a, x), special.gammainc(a, x), rtol=1e-12)
    npt.assert_allclose(gamma.gamma_q(a, x), special.gammaincc(a, x), rtol=1e-11)


@pytest.mark.parametrize("a,x", INCOMPLETE[:6])
def test_non_regularised_incomplete_gamma(a, x):
    npt.assert_allclose(
        gamma.tgamma_lower(a, x), special.gammainc(a, x) * special.gamma(a), rtol=1e-12
    )
    npt.assert_allclose(
        gamma.tgamma_upper(a, x), special.gammaincc(a, x) * special.gamma(a), rtol=1e-11
    )


SMALL_SHAPE = [(1e-5, 0.5), (1e-3, 0.1), (0.01, 1.0), (0.2, 0.05), (0.5, 1e-8)]


@pytest.mark.parametrize("policy", [REDUCED, STANDARD, EXTENDED], ids=["reduced", "standard", "extended"])
@pytest.mark.parametrize("a,x", INCOMPLETE + SMALL_SHAPE)
def test_gamma_p_plus_gamma_q_is_one(policy, a, x):
    total = gamma.gamma_p(a, x, policy) + gamma.gamma_q(a, x, policy)
    assert abs(total - 1) <= 4 * policy.epsilon


@pytest.mark.parametrize("a,x", SMALL_SHAPE)
def test_upper_incomplete_gamma_small_shape(a, x):
    npt.assert_allclose(gamma.gamma_q(a, x), special.gammaincc(a, x), rtol=1e-12)
    npt.assert_allclose(
        gamma.tgamma_upper(a, x), special.gammaincc(a, x) * special.gamma(a), rtol=1e-12
    )


@pytest.mark.parametrize("a,x", SMALL_SHAPE[:3])
def test_upper_incomplete_gamma_small_shape_reduced(a, x):
    a32, x32 = float(np.float32(a)), float(np.float32(x))
    expected = special.gammaincc(a32, x32)
    npt.assert_allclose(gamma.gamma_q(a, x, REDUCED), expected, rtol=2e-5)
    npt.assert_allclose(
        gamma.tgamma_upper(a, x, REDUCED), expected * special.gamma(a32), rtol=2e-5
    )


@pytest.mark.parametrize(
    "a,x,policy,rtol",
    [
        (1e5, 1e5, REDUCED, 5e-4),
        (1e5, 1e5 + 300.0, STANDARD, 1e-10),
        (1e8, 1e8, STANDARD, 1e-9),
    ],
)
def test_incomplete_gamma_large_shape(a, x, policy, rtol):
    npt.assert_allclose(float(gamma.gamma_p(a, x, policy)), special.gammainc(a, x), rtol=rtol)


def test_incomplete_gamma_at_zero():
    assert gamma.gamma_p(2.5, 0.0) == 0
    assert gamma.gamma_q(2.5, 0.0) == 1
    assert gamma.tgamma_lower(2.5, 0.0) == 0
    npt.assert_allclose(gamma.tgamma_upper(2.5, 0.0), special.gamma(2.5), rtol=1e-15)


@pytest.mark.parametrize("a,x", [(0.0, 1.0), (-1.0, 1.0), (1.0, -0.5)])
def test_incomplete_gamma_domain(a, x):
    for function in (gamma.gamma_p, gamma.gamma_q, gamma.tgamma_lower, gamma.tgamma_upper):
        with pytest.raises(DomainError):
            function(a, x)


def test_incomplete_gamma_convergence_failure():
    policy = get_policy("standard", max_iterations=3)
    with pytest.raises(ConvergenceError) as info:
        gamma.gamma_p(10.0, 5.0, policy)
    assert info.value.iterations == 3
    assert info.value.function == "gamma_p"


@pytest.mark.parametrize("a,x", [(0.5, 0.3), (3.0, 2.0), (50.0, 45.0), (1.0, 7.0)])
def test_gamma_p_derivative(a, x):
    expected = np.exp((a - 1) * np.log(x) - x - special.gammaln(a))
    npt.assert_allclose(gamma.gamma_p_derivative(a, x), expected, rtol=1e-12)


def test_gamma_p_derivative_at_zero():
    assert gamma.gamma_p_derivative(2.0, 0.0) == 0
    assert gamma.gamma_p_derivative(1.0, 0.0) == 1
    with pytest.raises(ResultOverflowError):
        gamma.gamma_p_derivative(0.5, 0.0)


@pytest.mark.parametrize(
    "a,p", [(0.5, 0.3), (1.0, 0.5), (2.0, 0.5), (3.0, 1e-5), (10.0, 0.99), (25.0, 0.7)]
)
def test_gamma_p_inv(a, p):
    x = gamma.gamma_p_inv(a, p)
    npt.assert_allclose(x, special.gammaincinv(a, p), rtol=1e-9)
    npt.assert_allclose(gamma.gamma_p(a, x), p, rtol=1e-9)


@pytest.mark.parametrize("a,q", [(0.5, 0.3), (2.0, 0.1), (4.0, 1e-6), (12.0, 0.5)])
def test_gamma_q_inv(a, q):
    npt.assert_allclose(gamma.gamma_q_inv(a, q), special.gammainccinv(a, q), rtol=1e-9)


@pytest.mark.parametrize("policy,rtol", [(REDUCED, 1e-4), (EXTENDED, 1e-14)], ids=["reduced", "extended"])
@pytest.mark.parametrize("a,p", [(0.5, 0.3), (2.0, 0.5), (10.0, 0.9), (25.0, 0.1)])
def test_gamma_p_inv_round_trip_other_widths(policy, rtol, a, p):
    x = gamma.gamma_p_inv(a, p, policy)
    npt.assert_allclose(float(gamma.gamma_p(a, x, policy)), p, rtol=rtol)


@pytest.mark.parametrize("a,p", [(0.1, 1e-20), (0.001, 0.5), (0.2, 1e-30)])
def test_gamma_p_inv_root_below_range_flushes_to_zero(a, p):
    # The roots (about 6e-201, 5e-302 and 6.5e-151) are below the float32 range.
    assert gamma.gamma_p_inv(a, p, REDUCED) == 0
    assert gamma.gamma_q_inv(a, 1 - p, REDUCED) == 0
    x = gamma.gamma_p_inv(a, p)
    assert x > 0
    npt.assert_allclose(gamma.gamma_p(a, x), p, rtol=1e-9)


def test_inverse_edge_cases():
    assert gamma.gamma_p_inv(2.0, 0.0) == 0
    assert gamma.gamma_q_inv(2.0, 1.0) == 0
    with pytest.raises(ResultOverflowError):
        gamma.gamma_p_inv(2.0, 1.0)
    with pytest.raises(ResultOverflowError):
        gamma.gamma_q_inv(2.0, 0.0)
    with pytest.raises(DomainError):
        gamma.gamma_p_inv(2.0, 1.5)
    with pytest.raises(DomainError):
        gamma.gamma_q_inv(-1.0, 0.5)


def test_incomplete_gamma_reduced_width():
    value = gamma.gamma_p(2.0, 1.5, REDUCED)
    assert isinstance(value, np.float32)
    npt.assert_allclose(value, special.gammainc(2.0, 1.5), rtol=1e-5)
    npt.assert_allclose(gamma.gamma_p_inv(2.0, 0.25, REDUCED), special.gammaincinv(2.0, 0.25), rtol=1e-5)


def test_standard_is_default():
    assert gamma.tgamma(3.5) == gamma.tgamma(3.5, STANDARD)
