"""Orthogonal polynomials by forward three-term recurrence.

Families: Hermite (physicists' convention), Laguerre, Legendre, Chebyshev of
the first and second kind, Jacobi and Gegenbauer, with derivatives of the last
two through their contiguous relations.

The ``*_next`` functions advance a recurrence by one degree from a caller
supplied pair of values. The cursor classes wrap that pair together with its
degree so the pairing cannot drift::

    cursor = HermiteCursor.start(0.5)
    for _ in range(10):
        cursor = cursor.advance()
    cursor.value  # H_10(0.5)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from specfunpy.errors import DomainError
from specfunpy.functions import misc
from specfunpy.precision import STANDARD, Policy


# Hermite


def _hermite(n: int, x, policy: Policy):
    previous = policy.dtype(1)
    if n == 0:
        return previous
    value = 2 * x
    for k in range(1, n):
        previous, value = value, 2 * x * value - 2 * k * previous
    return value


@misc.quiet
def hermite(n, x, policy: Policy = STANDARD):
    """Hermite polynomial H_n(x) (physicists' convention).

    Parameters
    ----------
    n:
        Non-negative integer degree.
    x:
        Evaluation point.
    policy:
        Precision policy.

    Returns
    -------
    numpy.floating
        ``H_n(x)`` from ``H_(k+1) = 2x H_k - 2k H_(k-1)``.
    """

    n = misc.order("hermite", "n", n)
    (x,) = misc.arguments("hermite", policy, x=x)
    return misc.finite("hermite", _hermite(n, x, policy))


@misc.quiet
def hermite_next(n, x, hn, hnm1, policy: Policy = STANDARD):
    """H_(n+1)(x) from ``hn = H_n(x)`` and ``hnm1 = H_(n-1)(x)``.

    The pair is not checked for consistency; a mismatched pair silently gives
    a wrong result. :class:`HermiteCursor` keeps the pair and degree together.
    """

    n = misc.order("hermite_next", "n", n)
    x, hn, hnm1 = misc.arguments("hermite_next", policy, x=x, hn=hn, hnm1=hnm1)
    return misc.finite("hermite_next", 2 * x * hn - 2 * n * hnm1)


# Laguerre


def _laguerre(n: int, x, policy: Policy):
    previous = policy.dtype(1)
    if n == 0:
        return previous
    value = 1 - x
    for k in range(1, n):
        previous, value = value, ((2 * k + 1 - x) * value - k * previous) / (k + 1)
    return value


@misc.quiet
def laguerre(n, x, policy: Policy = STANDARD):
    """Laguerre polynomial L_n(x)."""

    n = misc.order("laguerre", "n", n)
    (x,) = misc.arguments("laguerre", policy, x=x)
    return misc.finite("laguerre", _laguerre(n, x, policy))


@misc.quiet
def laguerre_next(n, x, ln, lnm1, policy: Policy = STANDARD):
    """L_(n+1)(x) from L_n(x) and L_(n-1)(x)."""

    n = misc.order("laguerre_next", "n", n)
    x, ln, lnm1 = misc.arguments("laguerre_next", policy, x=x, ln=ln, lnm1=lnm1)
    return misc.finite("laguerre_next", ((2 * n + 1 - x) * ln - n * lnm1) / (n + 1))


# Legendre


def _legendre(n: int, x, policy: Policy):
    previous = policy.dtype(1)
    if n == 0:
        return previous
    value = x
    for k in range(1, n):
        previous, value = value, ((2 * k + 1) * x * value - k * previous) / (k + 1)
    return value


def _check_unit_interval(function: str, x) -> None:
    if abs(x) > 1:
        raise DomainError(f"{function}: requires |x| <= 1, got x={x}", function=function)


@misc.quiet
def legendre_p(n, x, policy: Policy = STANDARD):
    """Legendre polynomial P_n(x) on ``-1 <= x <= 1``."""

    n = misc.order("legendre_p", "n", n)
    (x,) = misc.arguments("legendre_p", policy, x=x)
    _check_unit_interval("legendre_p", x)
    return _legendre(n, x, policy)


@misc.quiet
def legendre_next(n, x, pn, pnm1, policy: Policy = STANDARD):
    """P_(n+1)(x) from P_n(x) and P_(n-1)(x)."""

    n = misc.order("legendre_next", "n", n)
    x, pn, pnm1 = misc.arguments("legendre_next", policy, x=x, pn=pn, pnm1=pnm1)
    return misc.finite("legendre_next", ((2 * n + 1) * x * pn - n * pnm1) / (n + 1))


# Chebyshev


def _chebyshev(n: int, x, first, policy: Policy):
    previous = policy.dtype(1)
    if n == 0:
        return previous
    value = first
    for _ in range(1, n):
        previous, value = value, 2 * x * value - previous
    return value


@misc.quiet
def chebyshev_t(n, x, policy: Policy = STANDARD):
    """Chebyshev polynomial of the first kind T_n(x)."""

    n = misc.order("chebyshev_t", "n", n)
    (x,) = misc.arguments("chebyshev_t", policy, x=x)
    return misc.finite("chebyshev_t", _chebyshev(n, x, x, policy))


@misc.quiet
def chebyshev_u(n, x, policy: Policy = STANDARD):
    """Chebyshev polynomial of the second kind U_n(x)."""

    n = misc.order("chebyshev_u", "n", n)
    (x,) = misc.arguments("chebyshev_u", policy, x=x)
    return misc.finite("chebyshev_u", _chebyshev(n, x, 2 * x, policy))


@misc.quiet
def chebyshev_next(x, tn, tnm1, policy: Policy = STANDARD):
    """Next Chebyshev value ``2x T_n - T_(n-1)``; the same for both kinds."""

    x, tn, tnm1 = misc.arguments("chebyshev_next", policy, x=x, tn=tn, tnm1=tnm1)
    return misc.finite("chebyshev_next", 2 * x * tn - tnm1)


@misc.quiet
def chebyshev_clenshaw(c, x, policy: Policy = STANDARD):
    """Sum the Chebyshev series ``c[0]/2 + Σ_{k>=1} c[k] T_k(x)``.

    Parameters
    ----------
    c:
        Sequence of coefficients; an empty sequence sums to zero.
    x:
        Evaluation point.
    policy:
        Precision policy.
    """

    function = "chebyshev_clenshaw"
    (x,) = misc.arguments(function, policy, x=x)
    coefficients = misc.arguments(
        function, policy, **{f"c[{j}]": value for j, value in enumerate(c)}
    )
    if not coefficients:
        return policy.dtype(0)
    b1 = policy.dtype(0)
    b2 = policy.dtype(0)
    for j in range(len(coefficients) - 1, 0, -1):
        b1, b2 = 2 * x * b1 - b2 + coefficients[j], b1
    return misc.finite(function, x * b1 - b2 + coefficients[0] / 2)


# Jacobi


def check_jacobi_recurrence(n: int, alpha, beta, function: str) -> None:
    """Raise :class:`DomainError` if a recurrence denominator up to degree n vanishes."""

    g = alpha + beta
    for k in range(2, n + 1):
        if 2 * k * (k + g) * (2 * k + g - 2) == 0:
            raise DomainError(
                f"{function}: recurrence is singular for alpha={alpha}, beta={beta}",
                function=function,
            )


def _jacobi(n: int, alpha, beta, x, function: str, policy: Policy):
    check_jacobi_recurrence(n, alpha, beta, function)
    previous = policy.dtype(1)
    if n == 0:
        return previous
    value = (alpha + 1) + (alpha + beta + 2) * (x - 1) / 2
    g = alpha + beta
    for k in range(2, n + 1):
        denominator = 2 * k * (k + g) * (2 * k + g - 2)
        c0 = (2 * k + g - 1) * ((2 * k + g) * (2 * k + g - 2) * x + alpha * alpha - beta * beta)
        c1 = 2 * (k + alpha - 1) * (k + beta - 1) * (2 * k + g)
        previous, value = value, (c0 * value - c1 * previous) / denominator
    return value


def _jacobi_derivative(n: int, alpha, beta, x, k: int, function: str, policy: Policy):
    if k > n:
        return policy.dtype(0)
    scale = policy.dtype(1)
    for j in range(k):
        scale = scale * ((alpha + beta + n + j + 1) / 2)
    value = scale * _jacobi(n - k, alpha + k, beta + k, x, function, policy)
    return misc.finite(function, value)


@misc.quiet
def jacobi(n, alpha, beta, x, policy: Policy = STANDARD):
    """Jacobi polynomial P_n^(α,β)(x).

    Raises
    ------
    DomainError
        When the recurrence denominator ``2k(k+α+β)(2k+α+β-2)`` vanishes.
    """

    n = misc.order("jacobi", "n", n)
    alpha, beta, x = misc.arguments("jacobi", policy, alpha=alpha, beta=beta, x=x)
    return misc.finite("jacobi", _jacobi(n, alpha, beta, x, "jacobi", policy))


@misc.quiet
def jacobi_derivative(n, alpha, beta, x, k, policy: Policy = STANDARD):
    """k-th derivative of P_n^(α,β) at x.

    Uses ``d^k P_n^(α,β) = Π_{j<k} (α+β+n+j+1)/2 · P_(n-k)^(α+k,β+k)``; the
    result is exactly zero for ``k > n``.
    """

    function = "jacobi_derivative"
    n = misc.order(function, "n", n)
    k = misc.order(function, "k", k)
    alpha, beta, x = misc.arguments(function, policy, alpha=alpha, beta=beta, x=x)
    return _jacobi_derivative(n, alpha, beta, x, k, function, policy)


@misc.quiet
def jacobi_prime(n, alpha, beta, x, policy: Policy = STANDARD):
    function = "jacobi_prime"
    n = misc.order(function, "n", n)
    alpha, beta, x = misc.arguments(function, policy, alpha=alpha, beta=beta, x=x)
    return _jacobi_derivative(n, alpha, beta, x, 1, function, policy)


@misc.quiet
def jacobi_double_prime(n, alpha, beta, x, policy: Policy = STANDARD):
    function = "jacobi_double_prime"
    n = misc.order(function, "n", n)
    alpha, beta, x = misc.arguments(function, policy, alpha=alpha, beta=beta, x=x)
    return _jacobi_derivative(n, alpha, beta, x, 2, function, policy)


# Gegenbauer


def _gegenbauer(n: int, lam, x, policy: Policy):
    if x < 0:
        value = _gegenbauer(n, lam, -x, policy)
        return -value if n % 2 else value
    previous = policy.dtype(1)
    if n == 0:
        return previous
    value = 2 * lam * x
    g = 2 * lam - 2
    for k in range(2, n + 1):
        previous, value = value, (2 + g / k) * x * value - (1 + g / k) * previous
    return value


def check_gegenbauer_lambda(function: str, lam) -> None:
    if lam <= -0.5:
        raise DomainError(
            f"{function}: requires lambda > -1/2, got lambda={lam}", function=function
        )


def _gegenbauer_derivative(n: int, lam, x, k: int, function: str, policy: Policy):
    if k > n:
        return policy.dtype(0)
    scale = policy.dtype(1)
    for j in range(k):
        scale = scale * (2 * (lam + j))
    return misc.finite(function, scale * _gegenbauer(n - k, lam + k, x, policy))


@misc.quiet
def gegenbauer(n, lam, x, policy: Policy = STANDARD):
    """Gegenbauer (ultraspherical) polynomial C_n^λ(x) for λ > -1/2."""

    n = misc.order("gegenbauer", "n", n)
    lam, x = misc.arguments("gegenbauer", policy, lam=lam, x=x)
    check_gegenbauer_lambda("gegenbauer", lam)
    return misc.finite("gegenbauer", _gegenbauer(n, lam, x, policy))


@misc.quiet
def gegenbauer_derivative(n, lam, x, k, policy: Policy = STANDARD):
    """k-th derivative ``2^k (λ)_k C_(n-k)^(λ+k)(x)``; zero for ``k > n``."""

    function = "gegenbauer_derivative"
    n = misc.order(function, "n", n)
    k = misc.order(function, "k", k)
    lam, x = misc.arguments(function, policy, lam=lam, x=x)
    check_gegenbauer_lambda(function, lam)
    return _gegenbauer_derivative(n, lam, x, k, function, policy)


@misc.quiet
def gegenbauer_prime(n, lam, x, policy: Policy = STANDARD):
    function = "gegenbauer_prime"
    n = misc.order(function, "n", n)
    lam, x = misc.arguments(function, policy, lam=lam, x=x)
    check_gegenbauer_lambda(function, lam)
    return _gegenbauer_derivative(n, lam, x, 1, function, policy)


# Recurrence cursors


@dataclass(frozen=True)
class HermiteCursor:
    """``value = H_n(x)`` and ``previous = H_(n-1)(x)``."""

    n: int
    x: np.floating
    value: np.floating
    previous: np.floating
    policy: Policy = STANDARD

    @classmethod
    def start(cls, x, policy: Policy = STANDARD) -> HermiteCursor:
        (x,) = misc.arguments("HermiteCursor", policy, x=x)
        return cls(0, x, policy.dtype(1), policy.dtype(0), policy)

    def advance(self) -> HermiteCursor:
        return HermiteCursor(
            self.n + 1,
            self.x,
            hermite_next(self.n, self.x, self.value, self.previous, self.policy),
            self.value,
            self.policy,
        )


@dataclass(frozen=True)
class LaguerreCursor:
    """``value = L_n(x)`` and ``previous = L_(n-1)(x)``."""

    n: int
    x: np.floating
    value: np.floating
    previous: np.floating
    policy: Policy = STANDARD

    @classmethod
    def start(cls, x, policy: Policy = STANDARD) -> LaguerreCursor:
        (x,) = misc.arguments("LaguerreCursor", policy, x=x)
        return cls(0, x, policy.dtype(1), policy.dtype(0), policy)

    def advance(self) -> LaguerreCursor:
        return LaguerreCursor(
            self.n + 1,
            self.x,
            laguerre_next(self.n, self.x, self.value, self.previous, self.policy),
            self.value,
            self.policy,
        )


@dataclass(frozen=True)
class LegendreCursor:
    """``value = P_n(x)`` and ``previous = P_(n-1)(x)``."""

    n: int
    x: np.floating
    value: np.floating
    previous: np.floating
    policy: Policy = STANDARD

    @classmethod
    def start(cls, x, policy: Policy = STANDARD) -> LegendreCursor:
        (x,) = misc.arguments("LegendreCursor", policy, x=x)
        _check_unit_interval("LegendreCursor", x)
        return cls(0, x, policy.dtype(1), policy.dtype(0), policy)

    def advance(self) -> LegendreCursor:
        return LegendreCursor(
            self.n + 1,
            self.x,
            legendre_next(self.n, self.x, self.value, self.previous, self.policy),
            self.value,
            self.policy,
        )


@dataclass(frozen=True)
class ChebyshevCursor:
    """``value = T_n(x)`` (or ``U_n(x)``) and ``previous`` the degree below.

    The first step is kind specific (``T_1 = x``, ``U_1 = 2x``); after that
    both kinds share :func:`chebyshev_next`.
    """

    n: int
    x: np.floating
    value: np.floating
    previous: np.floating
    second_kind: bool = False
    policy: Policy = STANDARD

    @classmethod
    def start(cls, x, second_kind: bool = False, policy: Policy = STANDARD) -> ChebyshevCursor:
        (x,) = misc.arguments("ChebyshevCursor", policy, x=x)
        return cls(0, x, policy.dtype(1), policy.dtype(0), second_kind, policy)

    def advance(self) -> ChebyshevCursor:
        if self.n == 0:
            value = 2 * self.x if self.second_kind else self.x
        else:
            value = chebyshev_next(self.x, self.value, self.previous, self.policy)
        return ChebyshevCursor(
            self.n + 1, self.x, value, self.value, self.second_kind, self.policy
        )
