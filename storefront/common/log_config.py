"""
Logging Configuration

Configures logging for the catalog tools.
Output goes to stderr to keep stdout clean for upload summaries and listings.
"""

import logging
import sys

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# HTTP connection pool chatter, only wanted when debugging the store client
_NOISY_LOGGERS = ("urllib3",)


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure the storefront logger.

    Args:
        verbose: DEBUG level, including urllib3 connection logs
        quiet: WARNING level (ignored when verbose is set)

    Returns:
        The configured "storefront" logger
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("storefront")
    logger.setLevel(level)

    # Avoid duplicate handlers if called multiple times
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger
