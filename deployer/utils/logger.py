"""
Logging utility for the Pipeline Deployer.
"""

import logging
import sys
import os
from typing import Optional
from pathlib import Path
from datetime import datetime


class CorrelationIdFormatter(logging.Formatter):
    """
    Custom log format: timestamp | level | class | correlation_id | message
    """

    def formatTime(self, record, datefmt=None):
        """
        Format: YYYY-MM-DD HH:MM:SS.mmm
        """
        ct = datetime.fromtimestamp(record.created)
        s = ct.strftime(datefmt or "%Y-%m-%d %H:%M:%S")
        return f"{s}.{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, self.datefmt),
            record.levelname,
            getattr(record, "class_name", "N/A"),
            str(getattr(record, "correlation_id", "N/A")),
            record.getMessage(),
        ]
        log_line = " | ".join(parts)

        if record.exc_info:
            log_line += "\n" + self.formatException(record.exc_info)

        return log_line


class ActionsAnnotationHandler(logging.StreamHandler):
    """
    Emits GitHub Actions workflow commands for warnings and errors so they
    show up as annotations on the workflow run.
    """

    COMMANDS = {
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, stream=None):
        super().__init__(stream or sys.stdout)
        self.setLevel(logging.WARNING)

    def format(self, record: logging.LogRecord) -> str:
        command = self.COMMANDS.get(record.levelno, "error")
        # Workflow commands are single line; newlines must be url-encoded
        message = record.getMessage().replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{message}"


def running_in_actions() -> bool:
    """Return True when the process runs inside a GitHub Actions job."""
    return os.getenv("GITHUB_ACTIONS", "false").lower() == "true"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    annotate: Optional[bool] = None
) -> None:
    """
    Log Format: timestamp | level | class | correlation_id | message

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, reads from LOG_LEVEL env var (default: INFO)
        log_file: Optional file path to write logs to.
                  If None, reads from LOG_FILE env var
        log_to_console: Whether to output logs to console (default: True)
        annotate: Emit workflow annotations for warnings/errors.
                  If None, enabled when running inside GitHub Actions
    """
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    if log_file is None:
        log_file = os.getenv("LOG_FILE")

    if annotate is None:
        annotate = running_in_actions()

    formatter = CorrelationIdFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))
    root_logger.handlers.clear()

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(getattr(logging, level))
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(getattr(logging, level))
        root_logger.addHandler(file_handler)

    if annotate:
        root_logger.addHandler(ActionsAnnotationHandler())

    _configure_third_party_loggers()

    logger = logging.getLogger(__name__)
    logger.debug(
        "Logging configured: level=%s, console=%s, file=%s, annotate=%s",
        level, log_to_console, log_file or "None", annotate,
        extra={"correlation_id": "SYSTEM", "class_name": "LoggingConfig"}
    )


def _configure_third_party_loggers():
    """Configure log levels for noisy third-party libraries."""
    noisy_loggers = {
        "urllib3": logging.WARNING,
        "requests": logging.WARNING,
        "httpx": logging.WARNING,
        "httpcore": logging.WARNING,
    }

    for logger_name, log_level in noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(log_level)


def sanitize_url(url: str) -> str:
    """
    Remove credentials from URL for safe logging.

    Args:
        url: Instance URL (may contain user:password@)

    Returns:
        Sanitized URL with credentials masked
    """
    if "@" in url and "://" in url:
        protocol = url.split("://")[0]
        rest = url.split("@")[-1]
        return f"{protocol}://***@{rest}"
    return url


class ContextLogger:
    """
    Logger wrapper for class context.

    Usage:
        logger = ContextLogger(__name__, self.__class__.__name__)
        logger.info("Message", correlation_id="12345678")
    """

    def __init__(self, name: str, class_name: str = "N/A"):
        self.logger = logging.getLogger(name)
        self.class_name = class_name

    def _log(self, level: int, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        """Internal logging method with context."""
        extra = kwargs.pop("extra", {})
        extra["correlation_id"] = correlation_id or "N/A"
        extra["class_name"] = self.class_name

        self.logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        self._log(logging.DEBUG, msg, correlation_id, *args, **kwargs)

    def info(self, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        self._log(logging.INFO, msg, correlation_id, *args, **kwargs)

    def warning(self, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        self._log(logging.WARNING, msg, correlation_id, *args, **kwargs)

    def error(self, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        self._log(logging.ERROR, msg, correlation_id, *args, **kwargs)

    def exception(self, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        kwargs["exc_info"] = True
        self._log(logging.ERROR, msg, correlation_id, *args, **kwargs)

    def critical(self, msg: str, correlation_id: Optional[str] = None, *args, **kwargs):
        self._log(logging.CRITICAL, msg, correlation_id, *args, **kwargs)


def get_logger(name: str, class_name: str = "N/A") -> ContextLogger:
    """
    Get a context-aware logger instance.

    Args:
        name: Logger name (typically __name__ of the module)
        class_name: Name of the class using the logger

    Returns:
        ContextLogger instance with correlation_id support
    """
    return ContextLogger(name, class_name)
