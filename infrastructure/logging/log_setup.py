import os
import sys

from loguru import logger

LEVEL_ENV = "STEPWRIGHT_LOG_LEVEL"


def setup_console_logging(level: str = "", serialize: bool = False) -> None:
    """
    Route loguru to stderr. serialize=True writes one JSON object per line,
    with the structured event fields under record.extra.
    """
    level = level or os.environ.get(LEVEL_ENV, "INFO")
    logger.remove()
    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
        return
    logger.add(
        sys.stderr,
        level=level,
        format="{time:HH:mm:ss.SSS} | {level: <7} | {message} | {extra}",
    )
