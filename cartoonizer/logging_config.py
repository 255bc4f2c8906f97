"""Log output for the ``cartoonizer`` package."""
import logging
import sys
from typing import Optional, Union

CONSOLE_FORMAT = "%(levelname)-7s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Marks handlers installed here so a repeat call only replaces its own
_OWNED = "_cartoonizer_handler"


def _own(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    setattr(handler, _OWNED, True)
    return handler


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Route ``cartoonizer.*`` records to stderr and, optionally, a file.

    Safe to call repeatedly (CLI runs, Streamlit reruns): handlers from an
    earlier call are closed and replaced, handlers added by anyone else are
    left alone.

    Args:
        level: Level number or name such as ``"DEBUG"``.
        log_file: Also append records to this file.

    Returns:
        The package logger.
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    logger = logging.getLogger("cartoonizer")
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_own(logging.StreamHandler(sys.stderr), level, CONSOLE_FORMAT))
    if log_file:
        logger.addHandler(
            _own(logging.FileHandler(log_file, encoding="utf-8"), level, FILE_FORMAT)
        )

    logger.debug("Logging at %s", logging.getLevelName(level))
    return logger
