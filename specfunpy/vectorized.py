"""Evaluation over arrays of points.

At the standard width the work runs in the numba kernels of
:mod:`specfunpy.functions.cpu_numba`, in parallel over elements. The reduced
and extended widths map the scalar engine over the elements, so every width
returns the same values as the scalar functions. Errors are those of the
scalar engine: invalid arguments raise :class:`DomainError`, non-finite
results :class:`ResultOverflowError`.
"""

from __future__ import annotations

import numpy as np

from specfunpy import bsplines, elliptic, log, polynomials
from specfunpy.errors import DomainError, ResultOverflowError
from specfunpy.functions import cpu_numba, misc
from specfunpy.precision import STANDARD, Policy, Width

_log = log.numerics_logger(__name__)


def _points(function: str, x, policy: Policy) -> np.ndarray:
    try:
        points = np.asarray(x, dtype=policy.dtype)
    except (TypeError, ValueError) as exc:
        raise DomainError(f"{function}: x must be an array of reals", function=function) from exc
    if not np.all(np.isfinite(points)):
        raise DomainError(f"{function}: x must be finite", function=function)
    return points


def _checked(function: str, values: np.ndarray) -> np.ndarray:
    if not np.all(np.isfinite(values)):
        raise ResultOverflowError(
            f"{function}: result is outside the representable range", function=function
        )
    return values


def _map(engine, args: tuple, points: np.ndarray, policy: Policy) -> np.ndarray:
    flat = points.ravel()
    out = np.empty(flat.shape, dtype=policy.dtype)
    for i, value in enumerate(flat):
        out[i] = engine(*args, value, policy=policy)
    return out.reshape(points.shape)


def _native(policy: Policy) -> bool:
    return policy.width is Width.STANDARD


def _run(function: str, kernel, args: tuple, points: np.ndarray, policy: Policy):
    _log.numerics("%s: %d points in the compiled kernel", function, points.size)
    values = kernel(*args, np.ascontiguousarray(points.ravel()))
    return _checked(function, values.reshape(points.shape))


def hermite_array(n, x, policy: Policy = STANDARD) -> np.ndarray:
    """H_n at every element of ``x``.

    Parameters
    ----------
    n:
        Non-negative integer degree.
    x:
        Array-like of evaluation points; the output has the same shape.
    policy:
        Precision policy.
    """

    function = "hermite_array"
    n = misc.order(function, "n", n)
    points = _points(function, x, policy)
    if _native(policy):
        return _run(function, cpu_numba.hermite_kernel, (n,), points, policy)
    return _map(polynomials.hermite, (n,), points, policy)


def laguerre_array(n, x, policy: Policy = STANDARD) -> np.ndarray:
    function = "laguerre_array"
    n = misc.order(function, "n", n)
    points = _points(function, x, policy)
    if _native(policy):
        return _run(function, cpu_numba.laguerre_kernel, (n,), points, policy)
    return _map(polynomials.laguerre, (n,), points, policy)


def legendre_array(n, x, policy: Policy = STANDARD) -> np.ndarray:
    function = "legendre_array"
    n = misc.order(function, "n", n)
    points = _points(function, x, policy)
    if np.any(np.abs(points) > 1):
        raise DomainError(f"{function}: requires |x| <= 1", function=function)
    if _native(policy):
        return _run(function, cpu_numba.legendre_kernel, (n,), points, policy)
    return _map(polynomials.legendre_p, (n,), points, policy)


def jacobi_array(n, alpha, beta, x, policy: Policy = STANDARD) -> np.ndarray:
    """P_n^(α,β) at every element of ``x``."""

    function = "jacobi_array"
    n = misc.order(function, "n", n)
    alpha, beta = misc.arguments(function, policy, alpha=alpha, beta=beta)
    points = _points(function, x, policy)
    if _native(policy):
        polynomials.check_jacobi_recurrence(n, alpha, beta, function)
        return _run(
            function, cpu_numba.jacobi_kernel, (n, float(alpha), float(beta)), points, policy
        )
    return _map(polynomials.jacobi, (n, alpha, beta), points, policy)


def gegenbauer_array(n, lam, x, policy: Policy = STANDARD) -> np.ndarray:
    function = "gegenbauer_array"
    n = misc.order(function, "n", n)
    (lam,) = misc.arguments(function, policy, lam=lam)
    polynomials.check_gegenbauer_lambda(function, lam)
    points = _points(function, x, policy)
    if _native(policy):
        return _run(function, cpu_numba.gegenbauer_kernel, (n, float(lam)), points, policy)
    return _map(polynomials.gegenbauer, (n, lam), points, policy)


def cardinal_b_spline_array(n, x, policy: Policy = STANDARD) -> np.ndarray:
    """Centered cardinal B-spline of order ``n`` at every element of ``x``."""

    function = "cardinal_b_spline_array"
    n = misc.order(function, "n", n)
    points = _points(function, x, policy)
    if _native(policy):
        return _run(function, cpu_numba.b_spline_kernel, (n,), points, policy)
    return _map(bsplines.cardinal_b_spline, (n,), points, policy)


def forward_cardinal_b_spline_array(n, x, policy: Policy = STANDARD) -> np.ndarray:
    function = "forward_cardinal_b_spline_array"
    n = misc.order(function, "n", n)
    points = _points(function, x, policy)
    if _native(policy):
        return _run(function, cpu_numba.forward_b_spline_kernel, (n,), points, policy)
    return _map(bsplines.forward_cardinal_b_spline, (n,), points, policy)


def ellint_rf_array(x, y, z, policy: Policy = STANDARD) -> np.ndarray:
    """Carlson RF over broadcast arrays ``x``, ``y`` and ``z``.

    Raises
    ------
    DomainError
        If any triple has a negative member or more than one zero.
    ConvergenceError
        If the duplication fails to converge for any element.
    """

    function = "ellint_rf_array"
    x, y, z = np.broadcast_arrays(
        _points(function, x, policy),
        _points(function, y, policy),
        _points(function, z, policy),
    )
    if np.any((x < 0) | (y < 0) | (z < 0)):
        raise DomainError(f"{function}: arguments must be non-negative", function=function)
    zeros = (x == 0).astype(int) + (y == 0).astype(int) + (z == 0).astype(int)
    if np.any(zeros > 1):
        raise DomainError(f"{function}: at most one argument may be zero", function=function)
    if not _native(policy):
        out = np.empty(x.shape, dtype=policy.dtype)
        for index in np.ndindex(x.shape):
            out[index] = elliptic.ellint_rf(x[index], y[index], z[index], policy)
        return out
    _log.numerics("%s: %d points in the compiled kernel", function, x.size)
    values, failures = cpu_numba.ellint_rf_kernel(
        np.ascontiguousarray(x.ravel()),
        np.ascontiguousarray(y.ravel()),
        np.ascontiguousarray(z.ravel()),
        float(policy.epsilon),
        policy.max_iterations,
    )
    if failures:
        _log.warning("%s: %d of %d elements did not converge", function, failures, x.size)
        raise misc.convergence_failure(function, policy.max_iterations)
    return _checked(function, values.reshape(x.shape))
