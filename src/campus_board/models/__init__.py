"""Data models for the campus board client."""

from .outcomes import MutationOutcome, MutationStatus, Notice, NoticeLevel
from .records import (
    LOCAL_ID_PREFIXES,
    Announcement,
    EntityKind,
    FeedbackEntry,
    LikeResult,
    LostFoundItem,
    Origin,
    Record,
    VoteDirection,
    VoteTally,
)

__all__ = [
    "LOCAL_ID_PREFIXES",
    "Announcement",
    "EntityKind",
    "FeedbackEntry",
    "LikeResult",
    "LostFoundItem",
    "MutationOutcome",
    "MutationStatus",
    "Notice",
    "NoticeLevel",
    "Origin",
    "Record",
    "VoteDirection",
    "VoteTally",
]
