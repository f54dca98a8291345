"""
Logging utilities.
"""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure the package logger for command-line use.

    Log records from every ``ragmypdf`` module go to stderr. Calling this
    again only changes the level.

    Args:
        verbose: Log debug messages when True, info otherwise

    Returns:
        The package logger
    """
    logger = logging.getLogger('ragmypdf')

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
