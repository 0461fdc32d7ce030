"""API client module for the campus community API."""

from .client import APIError, CampusAPIClient, ResponseFormatError
from .resources import (
    ANNOUNCEMENTS_PATH,
    FEEDBACK_PATH,
    LOST_FOUND_PATH,
    RemoteResource,
)

__all__ = [
    "ANNOUNCEMENTS_PATH",
    "APIError",
    "CampusAPIClient",
    "FEEDBACK_PATH",
    "LOST_FOUND_PATH",
    "RemoteResource",
    "ResponseFormatError",
]
