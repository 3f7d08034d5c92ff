# quranlookup/logger.py
import logging
import sys

from colorama import Fore, Style, init

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

LEVEL_COLORS = {
    logging.DEBUG: Style.DIM + Fore.WHITE,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Style.BRIGHT + Fore.RED,
}


class ColorFormatter(logging.Formatter):
    """Formatter that colors each record by level, like the rest of the CLI output."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{message}{Style.RESET_ALL}"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Attach a colored stderr handler to the package logger."""
    init(autoreset=True)
    package_logger = logging.getLogger("quranlookup")
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    # Replace our own handler on repeat calls
    for handler in list(package_logger.handlers):
        if getattr(handler, "_quranlookup", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter(LOG_FORMAT))
    handler._quranlookup = True
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return package_logger
