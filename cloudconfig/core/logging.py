"""Loguru sinks for the refresher, with stdlib logging folded in"""
import sys
import logging
from pathlib import Path
from typing import Optional

from loguru import logger


class InterceptHandler(logging.Handler):
    """Forwards records of stdlib loggers (httpx, httpcore) to loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real call site
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = "logs/cloudconfig.log") -> None:
    """Replace loguru's default sink with a console sink and an optional file sink.

    The file sink always records DEBUG so failed cycles can be traced after
    the fact, whatever the console level.

    Args:
        log_level: Console level name, e.g. "INFO" or "DEBUG"
        log_file: Rotating log file path; None keeps output on stdout only
    """
    logger.remove()

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="50 MB",
            retention="10 days",
            compression="zip",
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ["httpx", "httpcore"]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
        # Per-request lines from httpx are noise at our refresh interval
        logging_logger.setLevel(logging.WARNING)

    logger.info(f"Logging initialized: level={log_level}, file={log_file}")


def get_logger():
    """Module-level loguru logger shared by the refresher components"""
    return logger
