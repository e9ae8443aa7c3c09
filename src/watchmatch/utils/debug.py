"""Universal debug/logging utility for watchmatch.

Provides setup_logger() for the package-wide logger and debug() for
trace output that is only emitted when the WATCHMATCH_DEBUG environment
variable is set to 1.
"""

import logging
import os
from typing import Optional

_logger: Optional[logging.Logger] = None


def _debug_on() -> bool:
    return os.getenv("WATCHMATCH_DEBUG", "0") == "1"


def setup_logger() -> logging.Logger:
    """Configure the package-wide ``watchmatch`` logger once and return it."""
    global _logger
    if _logger is not None:
        return _logger
    logger = logging.getLogger("watchmatch")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if _debug_on() else logging.INFO)
    _logger = logger
    return logger


def debug(msg: str) -> None:
    """Log a debug message if debugging is enabled."""
    if _debug_on():
        setup_logger().debug(msg)
