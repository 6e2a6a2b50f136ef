"""Logging configuration for koko using loguru.

Call `setup_logging()` once at startup. Provides:
- Console output with configurable verbosity
- Optional rotating file log when a log directory is given

slack-sdk logs through the standard library, so `bridge_logger()` hands it
a stdlib logger whose records are forwarded into loguru.
"""

from __future__ import annotations

import inspect
import logging
import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DDTHH:mm:ss.SSSZZ}</green> <level>{level:<8}</level> "
    "<cyan>{extra[component]}</cyan> - {message}"
)
_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[component]} | "
    "{name}:{function}:{line} - {message}"
)


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Configure loguru sinks for console and file output.

    Args:
        verbose: Show DEBUG-level messages on console.
        quiet: Suppress console output below WARNING.
        log_dir: Directory for log files. No file sink when omitted.
    """
    logger.remove()
    logger.configure(extra={"component": "koko"})

    if quiet:
        level = "WARNING"
    elif verbose:
        level = "DEBUG"
    else:
        level = "INFO"

    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "koko.log",
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            enqueue=True,
        )


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru.

    Every forwarded record is bound with the component the handler was
    created for. Anything below WARNING is demoted to DEBUG.
    """

    def __init__(self, component: str) -> None:
        super().__init__(level=logging.DEBUG)
        self.component = component

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        if record.levelno < logging.WARNING:
            level = "DEBUG"

        # Walk out of the logging module so loguru reports the real call site
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.bind(component=self.component).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def bridge_logger(name: str, component: str, *, debug: bool = False) -> logging.Logger:
    """Return a stdlib logger whose records end up in loguru.

    Without `debug` only warnings and errors are forwarded. The logger does
    not propagate to the root logger, so records are never emitted twice
    when the host application configures stdlib logging too.
    """
    std_logger = logging.getLogger(name)
    std_logger.handlers = [InterceptHandler(component)]
    std_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    std_logger.propagate = False
    return std_logger
