"""Utility helpers for the campus board client."""

from .clock import now_ms
from .logging import get_logger, setup_logging

__all__ = ["now_ms", "get_logger", "setup_logging"]
