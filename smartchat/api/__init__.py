"""
HTTP API for SmartChat.
"""

from .chat_app import app, init_api

__all__ = ["app", "init_api"]
