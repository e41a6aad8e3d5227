"""Core utilities package."""

from .config import Settings
from .logging import get_logger, log_event, setup_logging

__all__ = [
    "Settings",
    "setup_logging",
    "get_logger",
    "log_event",
]
