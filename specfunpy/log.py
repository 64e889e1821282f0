"""Logging helpers.

The package logs through the standard :mod:`logging` module. An additional
``NUMERICS`` level sits between ``DEBUG`` and ``INFO`` and carries iteration
counts and algorithm choices of the engines.
"""

from __future__ import annotations

import logging

NUMERICS = 15
logging.addLevelName(NUMERICS, "NUMERICS")

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class NumericsLogger(logging.LoggerAdapter):
    """Logger adapter exposing :meth:`numerics`."""

    def numerics(self, msg, *args, **kwargs):
        self.log(NUMERICS, msg, *args, **kwargs)


def numerics_logger(name: str) -> NumericsLogger:
    """Return the adapter for the module logger ``name``."""
    return NumericsLogger(logging.getLogger(name), {})


def configure(level: str | int = "WARNING") -> logging.Logger:
    """Attach a stream handler to the package logger.

    Parameters
    ----------
    level:
        Level name (including ``"NUMERICS"``) or number.

    Returns
    -------
    logging.Logger
        The ``specfunpy`` package logger.
    """

    if isinstance(level, str):
        level = level.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {level!r}")
    logger = logging.getLogger("specfunpy")
    logger.setLevel(level)
    if not any(getattr(h, "_specfunpy", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._specfunpy = True
        logger.addHandler(handler)
    return logger
