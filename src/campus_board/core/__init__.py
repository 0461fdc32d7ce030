"""
Reconciliation and optimistic-mutation engine shared by every entity kind.
"""

from campus_board.core.cache import RecordCache, merge_records
from campus_board.core.coordinator import MutationCoordinator
from campus_board.core.filters import RecordQuery, apply_query
from campus_board.core.kinds import (
    PROFILES,
    Action,
    KindProfile,
    TallyStyle,
    UnknownRecordError,
    UnsupportedActionError,
    get_profile,
)
from campus_board.core.ledger import VoteLedger, likes_after_toggle, tally_after_vote

__all__ = [
    "Action",
    "KindProfile",
    "MutationCoordinator",
    "PROFILES",
    "RecordCache",
    "RecordQuery",
    "TallyStyle",
    "UnknownRecordError",
    "UnsupportedActionError",
    "VoteLedger",
    "apply_query",
    "get_profile",
    "likes_after_toggle",
    "merge_records",
    "tally_after_vote",
]
