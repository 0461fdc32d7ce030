"""
Session services for the campus board client.
"""

from .board_service import CampusBoardService

__all__ = ["CampusBoardService"]
