"""
Campus Board - offline-tolerant client for the campus community API.

This package reconciles server-fetched confessions, feedback, lost & found
listings and announcements with a local persistent cache, and keeps votes and
likes consistent whether or not the server is reachable.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
