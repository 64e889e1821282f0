import numpy as np
import numpy.testing as npt
import pytest

from specfunpy import gamma
from specfunpy.precision import (
    EXTENDED,
    REDUCED,
    STANDARD,
    SUFFIXES,
    Width,
    get_policy,
    resolve_width,
)


@pytest.mark.parametrize(
    "policy,dtype",
    [(REDUCED, np.float32), (STANDARD, np.float64), (EXTENDED, np.longdouble)],
)
def test_policy_dtype_and_epsilon(policy, dtype):
    assert policy.dtype is dtype
    assert policy.epsilon == np.finfo(dtype).eps
    assert policy.overflow_ceiling == np.finfo(dtype).max
    assert policy.underflow_floor == np.finfo(dtype).tiny
    assert policy.log_max == np.log(policy.overflow_ceiling)
    assert policy.log_min < 0 < policy.log_max


def test_max_factorial():
    assert REDUCED.max_factorial == 34
    assert STANDARD.max_factorial == 170
    assert EXTENDED.max_factorial >= 170


def test_integer_limit():
    assert STANDARD.integer_limit == 2.0**53
    assert REDUCED.integer_limit == 2.0**24


def test_iteration_budgets_grow_with_width():
    assert REDUCED.max_iterations <= STANDARD.max_iterations <= EXTENDED.max_iterations
    assert REDUCED.asymptotic_threshold < STANDARD.asymptotic_threshold


@pytest.mark.parametrize(
    "alias,width",
    [
        ("f", Width.REDUCED),
        ("float32", Width.REDUCED),
        ("double", Width.STANDARD),
        (Width.EXTENDED, Width.EXTENDED),
        ("long double", Width.EXTENDED),
    ],
)
def test_resolve_width(alias, width):
    assert resolve_width(alias) is width


@pytest.mark.parametrize("bad", ["quad", "", 64, None])
def test_resolve_width_rejects_unknown(bad):
    with pytest.raises(ValueError):
        resolve_width(bad)


def test_get_policy_overrides():
    policy = get_policy("standard", max_iterations=5)
    assert policy.max_iterations == 5
    assert policy.dtype is np.float64
    # the shared default is untouched
    assert STANDARD.max_iterations != 5


@pytest.mark.parametrize("width,threshold", [("reduced", 9), ("standard", 1), ("extended", 12)])
def test_asymptotic_threshold_cannot_be_lowered(width, threshold):
    with pytest.raises(ValueError, match="asymptotic_threshold"):
        get_policy(width, asymptotic_threshold=threshold)


def test_asymptotic_threshold_can_be_raised():
    policy = get_policy("standard", asymptotic_threshold=25)
    assert policy.asymptotic_threshold == 25
    npt.assert_allclose(gamma.tgamma(1.5, policy), np.sqrt(np.pi) / 2, rtol=1e-15)
    npt.assert_allclose(gamma.lgamma(22.5, policy), gamma.lgamma(22.5), rtol=1e-14)


def test_policy_is_immutable():
    with pytest.raises(AttributeError):
        STANDARD.max_iterations = 1


def test_suffixes():
    assert SUFFIXES == {Width.STANDARD: "", Width.REDUCED: "_f", Width.EXTENDED: "_l"}
