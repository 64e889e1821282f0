"""One plain function per (operation, precision width).

For every operation ``name`` this module defines ``name`` (standard width),
``name_f`` (reduced) and ``name_l`` (extended), each taking only the
mathematical arguments::

    >>> from specfunpy import tgamma, tgamma_f
    >>> tgamma(5.0)
    np.float64(24.0)
    >>> tgamma_f(5.0)
    np.float32(24.0)

:data:`OPERATIONS` describes every operation by its engine function and a
string of argument kinds: ``i`` for a non-negative integer, ``f`` for a real
and ``v`` for a sequence of reals.
"""

from __future__ import annotations

import functools
from typing import Callable, NamedTuple

from specfunpy import bsplines, combinatorics, elliptic, gamma, polygamma, polynomials
from specfunpy.precision import SUFFIXES, Policy, Width, get_policy


class Operation(NamedTuple):
    engine: Callable
    kinds: str


OPERATIONS: dict[str, Operation] = {
    # gamma
    "tgamma": Operation(gamma.tgamma, "f"),
    "lgamma": Operation(gamma.lgamma, "f"),
    "tgamma_ratio": Operation(gamma.tgamma_ratio, "ff"),
    "tgamma_delta_ratio": Operation(gamma.tgamma_delta_ratio, "ff"),
    "lgamma_delta_ratio": Operation(gamma.lgamma_delta_ratio, "ff"),
    "tgamma_lower": Operation(gamma.tgamma_lower, "ff"),
    "tgamma_upper": Operation(gamma.tgamma_upper, "ff"),
    "gamma_p": Operation(gamma.gamma_p, "ff"),
    "gamma_q": Operation(gamma.gamma_q, "ff"),
    "gamma_p_inv": Operation(gamma.gamma_p_inv, "ff"),
    "gamma_q_inv": Operation(gamma.gamma_q_inv, "ff"),
    "gamma_p_derivative": Operation(gamma.gamma_p_derivative, "ff"),
    # digamma, polygamma, zeta
    "digamma": Operation(polygamma.digamma, "f"),
    "trigamma": Operation(polygamma.trigamma, "f"),
    "polygamma": Operation(polygamma.polygamma, "if"),
    "riemann_zeta": Operation(polygamma.riemann_zeta, "f"),
    # elliptic integrals
    "ellint_rc": Operation(elliptic.ellint_rc, "ff"),
    "ellint_rf": Operation(elliptic.ellint_rf, "fff"),
    "ellint_rd": Operation(elliptic.ellint_rd, "fff"),
    "ellint_rj": Operation(elliptic.ellint_rj, "ffff"),
    "ellint_rg": Operation(elliptic.ellint_rg, "fff"),
    # orthogonal polynomials
    "hermite": Operation(polynomials.hermite, "if"),
    "hermite_next": Operation(polynomials.hermite_next, "ifff"),
    "laguerre": Operation(polynomials.laguerre, "if"),
    "laguerre_next": Operation(polynomials.laguerre_next, "ifff"),
    "legendre_p": Operation(polynomials.legendre_p, "if"),
    "legendre_next": Operation(polynomials.legendre_next, "ifff"),
    "chebyshev_t": Operation(polynomials.chebyshev_t, "if"),
    "chebyshev_u": Operation(polynomials.chebyshev_u, "if"),
    "chebyshev_next": Operation(polynomials.chebyshev_next, "fff"),
    "chebyshev_clenshaw": Operation(polynomials.chebyshev_clenshaw, "vf"),
    "jacobi": Operation(polynomials.jacobi, "ifff"),
    "jacobi_prime": Operation(polynomials.jacobi_prime, "ifff"),
    "jacobi_double_prime": Operation(polynomials.jacobi_double_prime, "ifff"),
    "jacobi_derivative": Operation(polynomials.jacobi_derivative, "ifffi"),
    "gegenbauer": Operation(polynomials.gegenbauer, "iff"),
    "gegenbauer_prime": Operation(polynomials.gegenbauer_prime, "iff"),
    "gegenbauer_derivative": Operation(polynomials.gegenbauer_derivative, "iffi"),
    # combinatorics
    "factorial": Operation(combinatorics.factorial, "i"),
    "double_factorial": Operation(combinatorics.double_factorial, "i"),
    "rising_factorial": Operation(combinatorics.rising_factorial, "fi"),
    "falling_factorial": Operation(combinatorics.falling_factorial, "fi"),
    "binomial_coefficient": Operation(combinatorics.binomial_coefficient, "ii"),
    # cardinal B-splines
    "cardinal_b_spline": Operation(bsplines.cardinal_b_spline, "if"),
    "cardinal_b_spline_prime": Operation(bsplines.cardinal_b_spline_prime, "if"),
    "cardinal_b_spline_double_prime": Operation(
        bsplines.cardinal_b_spline_double_prime, "if"
    ),
    "forward_cardinal_b_spline": Operation(bsplines.forward_cardinal_b_spline, "if"),
}


def _bind(engine: Callable, policy: Policy, name: str) -> Callable:
    @functools.wraps(engine)
    def bound(*args):
        return engine(*args, policy=policy)

    bound.__name__ = bound.__qualname__ = name
    bound.__module__ = __name__
    bound.policy = policy
    return bound


def _family(name: str) -> tuple[Callable, Callable, Callable]:
    engine = OPERATIONS[name].engine
    return tuple(
        _bind(engine, get_policy(width), name + SUFFIXES[width])
        for width in (Width.STANDARD, Width.REDUCED, Width.EXTENDED)
    )


def lookup(name: str, width: Width | str = Width.STANDARD, policy: Policy | None = None) -> Callable:
    """Return the function of operation ``name`` at ``width``.

    Parameters
    ----------
    name:
        Operation name, e.g. ``"gamma_p"``; a width suffix is not allowed.
    width:
        Precision width or alias. Ignored when ``policy`` is given.
    policy:
        A tuned policy (for example from :meth:`specfunpy.config.Config.policy`).

    Raises
    ------
    KeyError
        For an unknown operation.
    ValueError
        For an unknown width.
    """

    if name not in OPERATIONS:
        raise KeyError(f"Unknown operation {name!r}")
    if policy is None:
        policy = get_policy(width)
    return _bind(OPERATIONS[name].engine, policy, name + SUFFIXES[policy.width])


tgamma, tgamma_f, tgamma_l = _family("tgamma")
lgamma, lgamma_f, lgamma_l = _family("lgamma")
tgamma_ratio, tgamma_ratio_f, tgamma_ratio_l = _family("tgamma_ratio")
tgamma_delta_ratio, tgamma_delta_ratio_f, tgamma_delta_ratio_l = _family("tgamma_delta_ratio")
lgamma_delta_ratio, lgamma_delta_ratio_f, lgamma_delta_ratio_l = _family("lgamma_delta_ratio")
tgamma_lower, tgamma_lower_f, tgamma_lower_l = _family("tgamma_lower")
tgamma_upper, tgamma_upper_f, tgamma_upper_l = _family("tgamma_upper")
gamma_p, gamma_p_f, gamma_p_l = _family("gamma_p")
gamma_q, gamma_q_f, gamma_q_l = _family("gamma_q")
gamma_p_inv, gamma_p_inv_f, gamma_p_inv_l = _family("gamma_p_inv")
gamma_q_inv, gamma_q_inv_f, gamma_q_inv_l = _family("gamma_q_inv")
gamma_p_derivative, gamma_p_derivative_f, gamma_p_derivative_l = _family("gamma_p_derivative")

digamma, digamma_f, digamma_l = _family("digamma")
trigamma, trigamma_f, trigamma_l = _family("trigamma")
polygamma, polygamma_f, polygamma_l = _family("polygamma")
riemann_zeta, riemann_zeta_f, riemann_zeta_l = _family("riemann_zeta")

ellint_rc, ellint_rc_f, ellint_rc_l = _family("ellint_rc")
ellint_rf, ellint_rf_f, ellint_rf_l = _family("ellint_rf")
ellint_rd, ellint_rd_f, ellint_rd_l = _family("ellint_rd")
ellint_rj, ellint_rj_f, ellint_rj_l = _family("ellint_rj")
ellint_rg, ellint_rg_f, ellint_rg_l = _family("ellint_rg")

hermite, hermite_f, hermite_l = _family("hermite")
hermite_next, hermite_next_f, hermite_next_l = _family("hermite_next")
laguerre, laguerre_f, laguerre_l = _family("laguerre")
laguerre_next, laguerre_next_f, laguerre_next_l = _family("laguerre_next")
legendre_p, legendre_p_f, legendre_p_l = _family("legendre_p")
legendre_next, legendre_next_f, legendre_next_l = _family("legendre_next")
chebyshev_t, chebyshev_t_f, chebyshev_t_l = _family("chebyshev_t")
chebyshev_u, chebyshev_u_f, chebyshev_u_l = _family("chebyshev_u")
chebyshev_next, chebyshev_next_f, chebyshev_next_l = _family("chebyshev_next")
chebyshev_clenshaw, chebyshev_clenshaw_f, chebyshev_clenshaw_l = _family("chebyshev_clenshaw")
jacobi, jacobi_f, jacobi_l = _family("jacobi")
jacobi_prime, jacobi_prime_f, jacobi_prime_l = _family("jacobi_prime")
jacobi_double_prime, jacobi_double_prime_f, jacobi_double_prime_l = _family("jacobi_double_prime")
jacobi_derivative, jacobi_derivative_f, jacobi_derivative_l = _family("jacobi_derivative")
gegenbauer, gegenbauer_f, gegenbauer_l = _family("gegenbauer")
gegenbauer_prime, gegenbauer_prime_f, gegenbauer_prime_l = _family("gegenbauer_prime")
gegenbauer_derivative, gegenbauer_derivative_f, gegenbauer_derivative_l = _family(
    "gegenbauer_derivative"
)

factorial, factorial_f, factorial_l = _family("factorial")
double_factorial, double_factorial_f, double_factorial_l = _family("double_factorial")
rising_factorial, rising_factorial_f, rising_factorial_l = _family("rising_factorial")
falling_factorial, falling_factorial_f, falling_factorial_l = _family("falling_factorial")
binomial_coefficient, binomial_coefficient_f, binomial_coefficient_l = _family(
    "binomial_coefficient"
)

cardinal_b_spline, cardinal_b_spline_f, cardinal_b_spline_l = _family("cardinal_b_spline")
cardinal_b_spline_prime, cardinal_b_spline_prime_f, cardinal_b_spline_prime_l = _family(
    "cardinal_b_spline_prime"
)
(
    cardinal_b_spline_double_prime,
    cardinal_b_spline_double_prime_f,
    cardinal_b_spline_double_prime_l,
) = _family("cardinal_b_spline_double_prime")
(
    forward_cardinal_b_spline,
    forward_cardinal_b_spline_f,
    forward_cardinal_b_spline_l,
) = _family("forward_cardinal_b_spline")

__all__ = [
    "OPERATIONS",
    "Operation",
    "lookup",
    *(name + suffix for name in OPERATIONS for suffix in ("", "_f", "_l")),
]
