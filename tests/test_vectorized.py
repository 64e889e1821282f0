import numpy as np
import numpy.testing as npt
import pytest
from scipy import special

from specfunpy import bsplines, polynomials, vectorized
from specfunpy.errors import ConvergenceError, DomainError, ResultOverflowError
from specfunpy.precision import EXTENDED, REDUCED, get_policy


def test_polynomial_kernels_match_scipy():
    rng = np.random.default_rng(0)
    x = rng.uniform(-1, 1, size=(4, 25))

    npt.assert_allclose(vectorized.hermite_array(7, x), special.eval_hermite(7, x), rtol=1e-12, atol=1e-12)
    npt.assert_allclose(vectorized.laguerre_array(7, x), special.eval_laguerre(7, x), rtol=1e-12, atol=1e-13)
    npt.assert_allclose(vectorized.legendre_array(7, x), special.eval_legendre(7, x), rtol=1e-12, atol=1e-14)
    npt.assert_allclose(
        vectorized.jacobi_array(6, 0.5, 1.5, x), special.eval_jacobi(6, 0.5, 1.5, x), rtol=1e-12, atol=1e-13
    )
    npt.assert_allclose(
        vectorized.gegenbauer_array(6, 1.25, x), special.eval_gegenbauer(6, 1.25, x), rtol=1e-12, atol=1e-13
    )


def test_kernels_match_scalar_engine():
    x = np.linspace(-0.95, 0.95, 11)
    for n in (0, 1, 4):
        npt.assert_allclose(
            vectorized.hermite_array(n, x), [polynomials.hermite(n, v) for v in x], rtol=1e-15
        )
        npt.assert_allclose(
            vectorized.gegenbauer_array(n, 0.75, x),
            [polynomials.gegenbauer(n, 0.75, v) for v in x],
            rtol=1e-15,
        )


UNIT = np.linspace(-1.0, 1.0, 41)

KERNEL_SWEEPS = {
    "hermite": (vectorized.hermite_array, polynomials.hermite, (), np.linspace(-4.0, 4.0, 41)),
    "laguerre": (vectorized.laguerre_array, polynomials.laguerre, (), np.linspace(0.0, 40.0, 41)),
    "legendre": (vectorized.legendre_array, polynomials.legendre_p, (), UNIT),
    "jacobi": (vectorized.jacobi_array, polynomials.jacobi, (0.5, -0.25), UNIT),
    "gegenbauer": (vectorized.gegenbauer_array, polynomials.gegenbauer, (1.25,), UNIT),
    "gegenbauer_negative_lambda": (
        vectorized.gegenbauer_array,
        polynomials.gegenbauer,
        (-0.25,),
        UNIT,
    ),
    "b_spline": (
        vectorized.cardinal_b_spline_array,
        bsplines.cardinal_b_spline,
        (),
        np.linspace(-17.0, 17.0, 137),
    ),
    "forward_b_spline": (
        vectorized.forward_cardinal_b_spline_array,
        bsplines.forward_cardinal_b_spline,
        (),
        np.linspace(-1.0, 33.0, 137),
    ),
}


@pytest.mark.parametrize("name", list(KERNEL_SWEEPS))
def test_kernels_match_scalar_engine_over_degrees(name):
    array, scalar, parameters, x = KERNEL_SWEEPS[name]
    for n in range(31):
        expected = np.array([scalar(n, *parameters, v) for v in x])
        scale = max(1.0, float(np.max(np.abs(expected))))
        npt.assert_allclose(
            array(n, *parameters, x),
            expected,
            rtol=1e-13,
            atol=1e-13 * scale,
            err_msg=f"{name} n={n}",
        )


def test_shape_is_preserved():
    x = np.zeros((2, 3, 4))
    assert vectorized.legendre_array(3, x).shape == (2, 3, 4)
    assert vectorized.cardinal_b_spline_array(3, x).shape == (2, 3, 4)
    assert vectorized.hermite_array(2, 0.5).shape == ()


def test_b_spline_kernels_match_scalar_engine():
    x = np.linspace(-3.0, 3.0, 49)
    for n in (0, 1, 2, 3, 5):
        npt.assert_allclose(
            vectorized.cardinal_b_spline_array(n, x),
            [bsplines.cardinal_b_spline(n, v) for v in x],
            rtol=1e-14,
            atol=1e-16,
        )
        npt.assert_allclose(
            vectorized.forward_cardinal_b_spline_array(n, x + 3.0),
            [bsplines.forward_cardinal_b_spline(n, v + 3.0) for v in x],
            rtol=1e-14,
            atol=1e-16,
        )


def test_ellint_rf_array_broadcasts():
    x = np.array([1.0, 2.0, 0.5])
    y = np.array([[2.0], [3.0]])
    values = vectorized.ellint_rf_array(x, y, 4.0)
    assert values.shape == (2, 3)
    npt.assert_allclose(values, special.elliprf(x, y, 4.0), rtol=1e-13)
    npt.assert_allclose(vectorized.ellint_rf_array(1.0, 2.0, 0.0), 1.3110287771461, rtol=1e-13)


def test_ellint_rf_array_errors():
    with pytest.raises(DomainError):
        vectorized.ellint_rf_array([1.0, -1.0], 1.0, 1.0)
    with pytest.raises(DomainError):
        vectorized.ellint_rf_array([0.0], [0.0], [1.0])
    with pytest.raises(ConvergenceError):
        vectorized.ellint_rf_array([1e-3], [1.0], [1e3], get_policy("standard", max_iterations=1))


def test_invalid_input():
    with pytest.raises(DomainError):
        vectorized.hermite_array(-1, [0.5])
    with pytest.raises(DomainError):
        vectorized.hermite_array(2, [0.5, np.nan])
    with pytest.raises(DomainError):
        vectorized.legendre_array(2, [0.5, 1.5])
    with pytest.raises(DomainError):
        vectorized.gegenbauer_array(2, -0.75, [0.5])
    with pytest.raises(DomainError):
        vectorized.jacobi_array(3, -1.0, -1.0, [0.5])


def test_overflow_is_reported():
    with pytest.raises(ResultOverflowError):
        vectorized.hermite_array(200, [1e3])


@pytest.mark.parametrize("policy,dtype", [(REDUCED, np.float32), (EXTENDED, np.longdouble)])
def test_other_widths_use_the_scalar_engine(policy, dtype):
    x = np.array([-0.5, 0.25, 0.8])
    values = vectorized.legendre_array(5, x, policy)
    assert values.dtype == dtype
    npt.assert_array_equal(values, [polynomials.legendre_p(5, v, policy) for v in x])

    values = vectorized.ellint_rf_array(x + 1, 2.0, 3.0, policy)
    assert values.dtype == dtype
    npt.assert_allclose(values.astype(float), special.elliprf(x + 1, 2.0, 3.0), rtol=1e-6)
