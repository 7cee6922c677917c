"""Console and file logging for host drivers that want IceBento's messages.

The package itself only creates module loggers under the "icebento"
namespace and never adds handlers; a driver calls setup_logging() once.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach handlers to the 'icebento' logger and return it.

    Args:
        level: Threshold for the logger and every handler it gets.
        log_file: Also write messages here, truncating any existing file.
    """
    logger = logging.getLogger("icebento")
    logger.setLevel(level)

    # Repeated calls replace handlers rather than stacking them
    logger.handlers.clear()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging to {len(handlers)} handler(s) at level {logging.getLevelName(level)}.")
    return logger
