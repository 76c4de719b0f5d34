"""
Logging setup for pisoflow runs.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, very_verbose: bool = False,
                  logger_name: str = 'pisoflow') -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Default level is WARNING on stderr; verbose selects INFO and very_verbose
    DEBUG, both on stdout. Calling it again replaces the previous handler.

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(logger_name)

    if verbose:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.INFO)
    elif very_verbose:
        logger.setLevel(logging.DEBUG)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)
        ch = logging.StreamHandler(stream=sys.stderr)
        ch.setLevel(logging.WARNING)

    # Create formatter for message output
    formatter = logging.Formatter(LOG_FORMAT)
    ch.setFormatter(formatter)

    for handler in list(logger.handlers):
        if getattr(handler, '_pisoflow_handler', False):
            logger.removeHandler(handler)
    ch._pisoflow_handler = True
    logger.addHandler(ch)

    return logger
