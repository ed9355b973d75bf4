"""Logging setup for the macro documentation generator.

Configures the ``macrodoc`` logger that every module logger hangs off.
Log level and format are driven by the ``logging`` section of config.yaml.
"""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "macrodoc"


def setup_logging(
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package logger with console and optional file output.

    Existing handlers are closed and removed first, so calling this more
    than once never duplicates log lines.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        log_format: Format string for log messages.
        log_file: Optional file that receives the same records.
        stream: Console stream. Defaults to stderr so generated output
            written to stdout stays clean.

    Returns:
        The configured ``macrodoc`` logger.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    package_logger.setLevel(numeric_level)

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.debug("Logging initialized at level %s", level)
    return package_logger
