"""Special functions at three floating point widths.

Every operation exists as ``name`` (float64), ``name_f`` (float32) and
``name_l`` (longdouble). Array helpers live in :mod:`specfunpy.vectorized`.
"""

from .api import *  # noqa: F401,F403
from .api import OPERATIONS, Operation, lookup
from .api import __all__ as _api_all
from .config import Config
from .errors import (
    ConvergenceError,
    DomainError,
    PoleError,
    ResultOverflowError,
    SpecialFunctionError,
)
from .polynomials import ChebyshevCursor, HermiteCursor, LaguerreCursor, LegendreCursor
from .precision import EXTENDED, REDUCED, STANDARD, Policy, Width, get_policy

__version__ = "0.1.0"

__all__ = [
    *_api_all,
    "Config",
    "ConvergenceError",
    "DomainError",
    "PoleError",
    "ResultOverflowError",
    "SpecialFunctionError",
    "ChebyshevCursor",
    "HermiteCursor",
    "LaguerreCursor",
    "LegendreCursor",
    "EXTENDED",
    "REDUCED",
    "STANDARD",
    "Policy",
    "Width",
    "get_policy",
]
