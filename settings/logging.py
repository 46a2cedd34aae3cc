"""Logging configuration."""

import re
import sys

from loguru import logger

from settings import LOG_DIR, LOG_LEVEL

# OAuth access tokens ("ya29.<...>") and bearer headers must never reach a log sink
_SECRET = re.compile(r"(ya29\.[\w.-]+|Bearer\s+[\w.-]+)")


def redact(text: str) -> str:
    return _SECRET.sub("<redacted>", text)


def _patch(record) -> None:
    record["message"] = redact(record["message"])


def setup_logging(level: str = LOG_LEVEL, to_file: bool = True):
    """Console plus optional daily-rotated file output, with credentials masked."""
    logger.remove()
    logger.configure(patcher=_patch)

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            LOG_DIR / "gsc_sync_{time:YYYY-MM-DD}.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="00:00",
            retention="14 days",
            compression="gz",
        )
        logger.info("Logging to {}", LOG_DIR)

    return logger
