"""Logging helpers for tlgen."""

import logging
from typing import Optional

_LOGGER_NAME = "tlgen"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the tlgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the tlgen logger."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[tlgen] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
