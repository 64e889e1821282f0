"""Error taxonomy shared by all engines.

Notes
-----
Every failure is raised at the point of detection. The three families are
kept distinct so callers can tell an undefined result (``DomainError``) from
one that is too large to represent (``ResultOverflowError``) and from an
iteration that ran out of budget (``ConvergenceError``).
"""

from __future__ import annotations


class SpecialFunctionError(ArithmeticError):
    """Base class for all evaluation failures.

    Parameters
    ----------
    message:
        Human readable description.
    function:
        Name of the operation that failed.
    """

    def __init__(self, message: str, *, function: str | None = None):
        super().__init__(message)
        self.function = function


class DomainError(SpecialFunctionError, ValueError):
    """An argument lies outside the mathematical domain of the function."""


class PoleError(DomainError):
    """The function has a pole at the requested argument."""


class ResultOverflowError(SpecialFunctionError, OverflowError):
    """The true result exceeds the representable range of the precision."""


class ConvergenceError(SpecialFunctionError, RuntimeError):
    """An iterative algorithm exhausted its iteration budget.

    Parameters
    ----------
    message:
        Human readable description.
    function:
        Name of the operation that failed.
    iterations:
        Number of iterations performed.
    estimate:
        Last iterate, kept for diagnostics only.
    """

    def __init__(
        self,
        message: str,
        *,
        function: str | None = None,
        iterations: int = 0,
        estimate=None,
    ):
        super().__init__(message, function=function)
        self.iterations = iterations
        self.estimate = estimate
