"""Logging setup for the deadlock-gc client"""

import inspect
import logging
import sys
from collections.abc import Iterable

from loguru import logger

from deadlock_gc.core.config import ClientConfig

# Stdlib loggers owned by this package and the transports it is paired with
DEFAULT_BRIDGED_LOGGERS = ("deadlock_gc.transport", "websockets")

_bridged: set[str] = set()


class _InterceptHandler(logging.Handler):
    """Re-emit stdlib records through loguru from the original call site"""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame is not None and (
            depth == 0 or frame.f_code.co_filename == logging.__file__
        ):
            frame = frame.f_back
            depth += 1

        logger.bind(stdlib_logger=record.name).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


def install_logging_bridge(
    names: Iterable[str] = DEFAULT_BRIDGED_LOGGERS,
) -> None:
    """Route the named stdlib loggers into loguru, once per name."""
    handler = _InterceptHandler()
    for name in names:
        if name in _bridged:
            continue
        std_logger = logging.getLogger(name)
        std_logger.setLevel(logging.DEBUG)
        std_logger.addHandler(handler)
        std_logger.propagate = False
        _bridged.add(name)


def configure_logging(config: ClientConfig | None = None) -> None:
    """Configure loguru sinks for a long-running client process

    Uses config.log_level for the stderr and file sinks and writes rotating
    log files to config.log_dir when it is set.

    Args:
        config: Client configuration; defaults to ClientConfig.from_env()
    """
    config = config or ClientConfig.from_env()

    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    if config.log_dir:
        logger.add(
            f"{config.log_dir}/deadlock_gc_{{time}}.log",
            rotation="1 day",
            retention="30 days",
            compression="gz",
            level=config.log_level,
        )
    install_logging_bridge()
