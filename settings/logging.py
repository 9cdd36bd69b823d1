"""Logging configuration - loguru sinks plus stdlib interception."""

import logging
import sys

from loguru import logger

from settings import LOG_DIR

# Stdlib loggers routed into loguru (server + HTTP client)
INTERCEPTED = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "httpx")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip frames from the logging module so loguru reports the caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_stdlib(level: str = "INFO") -> None:
    """Route server and HTTP client loggers through loguru."""
    for name in INTERCEPTED:
        std = logging.getLogger(name)
        std.handlers = [InterceptHandler()]
        std.setLevel(level)
        std.propagate = False


def setup_logging(level: str = "INFO", to_file: bool = True):
    """Configure logging with console and optional rotating file output."""
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>sw</cyan> | <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if to_file:
        LOG_DIR.mkdir(exist_ok=True)
        logger.add(
            LOG_DIR / "kilalo_sw_{time:YYYY-MM-DD}.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="00:00",
            retention="7 days",
            compression="gz",
        )
        logger.info("Logging to {}", LOG_DIR)

    intercept_stdlib(level)
    return logger
