"""
Utility functions for SmartChat.
"""

from .logger import (
    SmartChatLogger,
    configure_logging,
    get_logger,
    reset_loggers,
)

__all__ = [
    "SmartChatLogger",
    "configure_logging",
    "get_logger",
    "reset_loggers",
]
