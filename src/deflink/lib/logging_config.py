"""Logging setup shared by the library and the command line interface."""

import logging
import sys

ROOT_LOGGER_NAME = "deflink"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger inside the deflink logger hierarchy.

    Args:
        name: Module name, usually ``__name__``. Names outside the
            ``deflink`` namespace are nested under it.

    Returns:
        A standard library logger.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the deflink logger with a single stderr handler.

    Calling this repeatedly replaces the previous handler, so CLI commands
    can reconfigure logging from their flags without duplicating output.

    Args:
        verbose: Emit DEBUG records.
        quiet: Only emit WARNING and above. Ignored when ``verbose`` is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
