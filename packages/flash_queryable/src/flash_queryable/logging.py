import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from . import config


class UTCFormatter(logging.Formatter):
    """
    Formatter that stamps records in ISO-8601 UTC.
    """

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        super().__init__(fmt, datefmt)
        self.converter = time.gmtime

    def formatTime(self, record, datefmt=None):  # noqa: N802
        ct = self.converter(record.created)
        if datefmt:
            return time.strftime(datefmt, ct)
        t = time.strftime("%Y-%m-%d %H:%M:%S", ct)
        return "%s.%03dZ" % (t, record.msecs)


def get_logger(name: str) -> logging.Logger:
    """
    Returns a standard logger instance.

    Name loggers with dot-notation matching the module path:
    >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 10,
    capture_roots: bool = False,
    module_name: str = "flash_queryable",
) -> None:
    """
    Configure logging for the queryable bridge.

    Args:
        level: Logging level (INFO, DEBUG, etc.). Defaults to the
               FLASH_QUERYABLE_LOG_LEVEL setting.
        log_file: Path to write logs to.
        capture_roots: If True, configures the root logger.
                       If False, only configures 'flash_queryable.*' loggers.
    """
    if level is None:
        level = config.queryable_settings.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    target_logger = (
        logging.getLogger() if capture_roots else logging.getLogger(module_name)
    )

    # Reset handlers so tests can reconfigure.
    target_logger.handlers.clear()
    target_logger.setLevel(level)

    formatter = UTCFormatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    target_logger.addHandler(console)

    if log_file:
        file_path = Path(log_file).resolve()
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            target_logger.addHandler(file_handler)
        except OSError as e:
            # Read-only file systems still get console logging.
            sys.stderr.write(f"Failed to setup log file: {e}\n")

    if not capture_roots:
        target_logger.propagate = False
