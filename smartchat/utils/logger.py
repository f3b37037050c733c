"""
Logging infrastructure for SmartChat.

Provides console and rotating-file logging under the ``smartchat`` logger
namespace. Modules obtain child loggers through get_logger(); handlers are
attached once by configure_logging() during application bootstrap.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "smartchat"


class SmartChatLogger:
    """
    Application logger for SmartChat.

    Provides both file and console logging with proper formatting.
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        log_dir: str = "logs",
        log_file: str = "smartchat.log",
        log_level: str = "INFO",
        max_file_size_mb: int = 10,
        backup_count: int = 5,
    ) -> None:
        """
        Initialize logger.

        Args:
            name: Logger name
            log_dir: Directory for log files
            log_file: Log file name
            log_level: Console log level name (DEBUG, INFO, ...)
            max_file_size_mb: Size at which the log file rotates
            backup_count: Number of rotated files to keep
        """
        self.name = name
        self.log_dir = Path(log_dir)
        self.log_file = self.log_dir / log_file
        self.log_level = log_level.upper()
        self.max_file_size_mb = max_file_size_mb
        self.backup_count = backup_count

        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()

        self.file_formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        self.console_formatter = logging.Formatter(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        self._setup_file_handler()
        self._setup_console_handler()

    def _setup_file_handler(self) -> None:
        """Set up rotating file handler."""
        max_bytes = self.max_file_size_mb * 1024 * 1024

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)  # File gets all logs
        file_handler.setFormatter(self.file_formatter)

        self.logger.addHandler(file_handler)

    def _setup_console_handler(self) -> None:
        """Set up console handler."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, self.log_level, logging.INFO))
        console_handler.setFormatter(self.console_formatter)

        self.logger.addHandler(console_handler)

    def get_logger(self) -> logging.Logger:
        """Return the underlying logging.Logger."""
        return self.logger

    def close(self) -> None:
        """Flush and detach all handlers."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)


# Global logger instance
_logger: Optional[SmartChatLogger] = None


def configure_logging(config=None) -> SmartChatLogger:
    """
    Attach file and console handlers to the ``smartchat`` logger.

    Args:
        config: Optional ConfigManager supplying the ``logging.*`` settings

    Returns:
        The configured SmartChatLogger
    """
    global _logger
    if _logger is not None:
        _logger.close()

    if config is None:
        _logger = SmartChatLogger()
    else:
        _logger = SmartChatLogger(
            log_dir=config.get("logging.log_dir", "logs"),
            log_level=config.get("logging.level", "INFO"),
            max_file_size_mb=config.get("logging.max_file_size_mb", 10),
            backup_count=config.get("logging.backup_count", 5),
        )
    return _logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get application logger.

    Args:
        name: Optional component name, e.g. "tool_registry"

    Returns:
        The ``smartchat`` logger, or its ``smartchat.<name>`` child
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_loggers() -> None:
    """Reset global logger instance (mainly for testing)."""
    global _logger
    if _logger is not None:
        _logger.close()
    _logger = None
