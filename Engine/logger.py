import logging
import sys

ROOT_LOGGER = "forkshell"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (pid %(process)d): %(message)s"


def get_logger(name):
    """Return a child of the forkshell logger for one subsystem"""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(level="WARNING", path=None):
    """
    Configure the forkshell logger hierarchy.
    Diagnostics go to stderr, or to `path` when one is given.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if path:
        handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    logger.propagate = False
    return logger
