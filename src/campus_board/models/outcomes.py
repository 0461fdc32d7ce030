"""
Result objects returned by mutation coordinators.

Every user action resolves to a ``MutationOutcome``. Failures are reported
through the outcome's advisory notice, not raised.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .records import Record, VoteDirection, VoteTally


class MutationStatus(str, Enum):
    """How an action was carried out."""
    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """Non-blocking message for the presentation layer."""
    level: NoticeLevel
    message: str


class MutationOutcome(BaseModel):
    """
    Outcome of a create, vote, like, update or delete action.

    ``degraded`` means the action completed against local state only because
    the server could not be reached.
    """
    action: str
    status: MutationStatus
    record_id: Optional[str] = None
    record: Optional[Record] = None
    tally: Optional[VoteTally] = None
    likes: Optional[int] = None
    vote: Optional[VoteDirection] = None
    liked: Optional[bool] = None
    notice: Optional[Notice] = None

    @property
    def ok(self) -> bool:
        return self.status is not MutationStatus.FAILED

    @property
    def degraded(self) -> bool:
        return self.status is MutationStatus.DEGRADED
