from numba import jit, prange

import numpy as np

# IEEE semantics are kept (no fastmath): the callers rely on inf/nan to detect
# overflow and on exact comparisons at the spline support boundary.


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def hermite_kernel(n: int, x: np.ndarray) -> np.ndarray:
    """H_n at every element of the float64 array ``x``."""
    out = np.empty(x.size, dtype=np.float64)
    for i in prange(x.size):
        xi = x[i]
        previous = 1.0
        value = 1.0
        if n > 0:
            value = 2.0 * xi
        for k in range(1, n):
            current = 2.0 * xi * value - 2.0 * k * previous
            previous = value
            value = current
        out[i] = value
    return out


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def laguerre_kernel(n: int, x: np.ndarray) -> np.ndarray:
    out = np.empty(x.size, dtype=np.float64)
    for i in prange(x.size):
        xi = x[i]
        previous = 1.0
        value = 1.0
        if n > 0:
            value = 1.0 - xi
        for k in range(1, n):
            current = ((2.0 * k + 1.0 - xi) * value - k * previous) / (k + 1.0)
            previous = value
            value = current
        out[i] = value
    return out


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def legendre_kernel(n: int, x: np.ndarray) -> np.ndarray:
    out = np.empty(x.size, dtype=np.float64)
    for i in prange(x.size):
        xi = x[i]
        previous = 1.0
        value = 1.0
        if n > 0:
            value = xi
        for k in range(1, n):
            current = ((2.0 * k + 1.0) * xi * value - k * previous) / (k + 1.0)
            previous = value
            value = current
        out[i] = value
    return out


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def jacobi_kernel(n: int, alpha: float, beta: float, x: np.ndarray) -> np.ndarray:
    """P_n^(alpha, beta) at every element of ``x``.

    The caller checks that no recurrence denominator vanishes.
    """
    out = np.empty(x.size, dtype=np.float64)
    g = alpha + beta
    for i in prange(x.size):
        xi = x[i]
        previous = 1.0
        value = 1.0
        if n > 0:
            value = (alpha + 1.0) + (alpha + beta + 2.0) * (xi - 1.0) / 2.0
        for k in range(2, n + 1):
            denominator = 2.0 * k * (k + g) * (2.0 * k + g - 2.0)
            c0 = (2.0 * k + g - 1.0) * (
                (2.0 * k + g) * (2.0 * k + g - 2.0) * xi + alpha * alpha - beta * beta
            )
            c1 = 2.0 * (k + alpha - 1.0) * (k + beta - 1.0) * (2.0 * k + g)
            current = (c0 * value - c1 * previous) / denominator
            previous = value
            value = current
        out[i] = value
    return out


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def gegenbauer_kernel(n: int, lam: float, x: np.ndarray) -> np.ndarray:
    out = np.empty(x.size, dtype=np.float64)
    g = 2.0 * lam - 2.0
    for i in prange(x.size):
        xi = abs(x[i])
        previous = 1.0
        value = 1.0
        if n > 0:
            value = 2.0 * lam * xi
        for k in range(2, n + 1):
            current = (2.0 + g / k) * xi * value - (1.0 + g / k) * previous
            previous = value
            value = current
        if x[i] < 0.0 and n % 2 == 1:
            value = -value
        out[i] = value
    return out


@jit(nopython=True, nogil=True, cache=True)
def _b_spline_point(n: int, x: float, work: np.ndarray) -> float:
    ax = abs(x)
    half = (n + 1) / 2.0
    if ax > half:
        return 0.0
    if ax == half:
        return 0.5 if n == 0 else 0.0
    for j in range(n + 1):
        t = abs(ax + j - n / 2.0)
        if t < 0.5:
            work[j] = 1.0
        elif t == 0.5:
            work[j] = 0.5
        else:
            work[j] = 0.0
    for m in range(1, n + 1):
        h = (m + 1) / 2.0
        for j in range(n - m + 1):
            t = ax + j - (n - m) / 2.0
            work[j] = ((h + t) * work[j + 1] + (h - t) * work[j]) / m
    return work[0]


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def b_spline_kernel(n: int, x: np.ndarray) -> np.ndarray:
    """Centered cardinal B-spline of order ``n`` at every element of ``x``."""
    out = np.empty(x.size, dtype=np.float64)
    for i in prange(x.size):
        work = np.empty(n + 1, dtype=np.float64)
        out[i] = _b_spline_point(n, x[i], work)
    return out


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def forward_b_spline_kernel(n: int, x: np.ndarray) -> np.ndarray:
    out = np.empty(x.size, dtype=np.float64)
    shift = (n + 1) / 2.0
    for i in prange(x.size):
        if x[i] < 0.0 or x[i] > n + 1.0:
            out[i] = 0.0
        else:
            work = np.empty(n + 1, dtype=np.float64)
            out[i] = _b_spline_point(n, x[i] - shift, work)
    return out


@jit(nopython=True, parallel=True, nogil=True, cache=True)
def ellint_rf_kernel(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    epsilon: float,
    max_iterations: int,
):
    """Carlson RF by duplication for every element triple.

    Returns
    -------
    out : np.ndarray
        RF values; elements that did not converge hold nan.
    failures : int
        Number of elements that exhausted ``max_iterations``.
    """
    out = np.empty(x.size, dtype=np.float64)
    tolerance = (3.0 * epsilon) ** (-1.0 / 6.0)
    failures = 0
    for i in prange(x.size):
        xn = x[i]
        yn = y[i]
        zn = z[i]
        a0 = (xn + yn + zn) / 3.0
        q = tolerance * max(abs(a0 - xn), abs(a0 - yn), abs(a0 - zn))
        a = a0
        factor = 1.0
        converged = False
        for _ in range(max_iterations):
            if q * factor < abs(a):
                converged = True
                break
            sx = np.sqrt(xn)
            sy = np.sqrt(yn)
            sz = np.sqrt(zn)
            lam = sx * sy + sx * sz + sy * sz
            a = (a + lam) / 4.0
            xn = (xn + lam) / 4.0
            yn = (yn + lam) / 4.0
            zn = (zn + lam) / 4.0
            factor = factor / 4.0
        if converged:
            dx = (a0 - x[i]) * factor / a
            dy = (a0 - y[i]) * factor / a
            dz = -(dx + dy)
            e2 = dx * dy - dz * dz
            e3 = dx * dy * dz
            poly = (
                1.0
                + e3 * (1.0 / 14.0 + 3.0 * e3 / 104.0)
                + e2
                * (
                    -1.0 / 10.0
                    + e2 / 24.0
                    - 3.0 * e3 / 44.0
                    - 5.0 * e2 * e2 / 208.0
                    + e2 * e3 / 16.0
                )
            )
            out[i] = poly / np.sqrt(a)
        else:
            failures += 1
            out[i] = np.nan
    return out, failures
