"""Logging setup for lessc-batch commands."""

from __future__ import annotations

import logging

_LOGGER_NAME = "lessc_batch"


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a console handler to the package logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[lessc-batch] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
