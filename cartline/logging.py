"""
Logging for cartline.

Everything logs under the ``cartline`` package logger, so host applications
can tune or silence the cart with one ``logging.getLogger("cartline")`` call.
A stdout handler is attached only when nothing is configured yet (neither the
package logger nor the root logger has handlers).

Usage:
    from cartline.logging import get_logger, short_key
    logger = get_logger(__name__)

    logger.info(f"Removed item {short_key(item_key)}")
"""

import logging
import os
import sys
from functools import cache

PACKAGE_LOGGER = "cartline"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Item keys are md5 hex; 8 chars are enough to tell items apart in logs
SHORT_KEY_LENGTH = 8


def _configure_package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level_name = os.environ.get("CARTLINE_LOG_LEVEL", os.environ.get("LOG_LEVEL", "INFO")).upper()
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if package_logger.handlers or logging.getLogger().handlers:
        return package_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return package_logger


_configure_package_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the ``cartline`` namespace.

    Module names from this package are used as they are; any other name is
    nested under ``cartline`` so it shares the package level and handler.
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def short_key(key: object) -> str:
    """
    Render a storage or item key for a log line.

    Keys may come from user input: control characters are escaped so a key
    cannot forge extra log lines, and the result is cut to a short prefix.
    """
    if key is None or key == "":
        return "N/A"
    escaped = str(key).encode("unicode_escape").decode("ascii")
    return escaped[:SHORT_KEY_LENGTH]


__all__ = [
    "PACKAGE_LOGGER",
    "get_logger",
    "short_key",
]
