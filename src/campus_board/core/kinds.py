"""
Per-kind configuration for the generic cache, ledger and coordinator.

A ``KindProfile`` captures everything that differs between confessions,
feedback, lost & found and announcements, so a single engine serves all four.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Tuple, Type

from campus_board.api.resources import ANNOUNCEMENTS_PATH, FEEDBACK_PATH, LOST_FOUND_PATH
from campus_board.core.seeds import LEGACY_CONFESSION_TITLES
from campus_board.models import (
    Announcement,
    EntityKind,
    FeedbackEntry,
    LostFoundItem,
    Record,
)


class UnsupportedActionError(ValueError):
    """Raised when an action is requested for a kind that does not offer it."""


class UnknownRecordError(LookupError):
    """Raised when an action targets a record the cache does not hold."""

    def __init__(self, kind: EntityKind, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"No {kind.value} record with id '{record_id}'")


class TallyStyle(str, Enum):
    """How a kind counts reactions."""
    VOTES = "votes"
    LIKES = "likes"
    NONE = "none"


class Action(str, Enum):
    """Mutations a coordinator may perform."""
    CREATE = "create"
    VOTE = "vote"
    LIKE = "like"
    UPDATE = "update"
    UPDATE_STATUS = "update_status"
    MARK_RETURNED = "mark_returned"
    DELETE = "delete"


def _never(record: Record) -> bool:
    return False


def _legacy_confession(record: Record) -> bool:
    return record.title in LEGACY_CONFESSION_TITLES


def _is_confession(record: Record) -> bool:
    return getattr(record, "type", None) == "confession"


@dataclass(frozen=True)
class KindProfile:
    """Static description of one entity kind."""
    kind: EntityKind
    label: str
    model: Type[Record]
    id_tag: str
    resource_path: str
    tally: TallyStyle
    actions: frozenset
    required_fields: Tuple[str, ...]
    # Defaults for create; list_filters are forced on create and sent with every list call
    create_defaults: Dict[str, Any] = field(default_factory=dict)
    list_filters: Dict[str, Any] = field(default_factory=dict)
    # Records hidden from the board; also ignored when deciding whether to seed
    excludes: Callable[[Record], bool] = _never
    # Remote rows belonging to a sibling kind sharing the same resource
    rejects_remote: Callable[[Record], bool] = _never
    # (id field, name field) stamped with the signed-in user on offline create
    owner_fields: Tuple[str, ...] = ()

    def supports(self, action: Action) -> bool:
        return action in self.actions

    def require(self, action: Action) -> None:
        if not self.supports(action):
            raise UnsupportedActionError(f"{self.label} does not support '{action.value}'")


PROFILES: Dict[EntityKind, KindProfile] = {
    EntityKind.CONFESSION: KindProfile(
        kind=EntityKind.CONFESSION,
        label="Confession",
        model=FeedbackEntry,
        id_tag="conf",
        resource_path=FEEDBACK_PATH,
        tally=TallyStyle.VOTES,
        actions=frozenset({Action.CREATE, Action.VOTE, Action.DELETE}),
        required_fields=("title", "content"),
        create_defaults={"type": "confession", "priority": "low"},
        list_filters={"type": "confession"},
        excludes=_legacy_confession,
        rejects_remote=lambda record: not _is_confession(record),
    ),
    EntityKind.FEEDBACK: KindProfile(
        kind=EntityKind.FEEDBACK,
        label="Feedback",
        model=FeedbackEntry,
        id_tag="fb",
        resource_path=FEEDBACK_PATH,
        tally=TallyStyle.VOTES,
        actions=frozenset({Action.CREATE, Action.VOTE, Action.UPDATE_STATUS, Action.DELETE}),
        required_fields=("title", "content"),
        create_defaults={"type": "feedback", "priority": "medium"},
        excludes=_is_confession,
        rejects_remote=_is_confession,
    ),
    EntityKind.LOST_FOUND: KindProfile(
        kind=EntityKind.LOST_FOUND,
        label="Item",
        model=LostFoundItem,
        id_tag="lf",
        resource_path=LOST_FOUND_PATH,
        tally=TallyStyle.NONE,
        actions=frozenset({Action.CREATE, Action.UPDATE, Action.MARK_RETURNED, Action.DELETE}),
        required_fields=("title", "description", "location"),
        create_defaults={"category": "other", "status": "lost"},
        owner_fields=("reporter_id", "reporter_name"),
    ),
    EntityKind.ANNOUNCEMENT: KindProfile(
        kind=EntityKind.ANNOUNCEMENT,
        label="Announcement",
        model=Announcement,
        id_tag="ann",
        resource_path=ANNOUNCEMENTS_PATH,
        tally=TallyStyle.LIKES,
        actions=frozenset({Action.CREATE, Action.LIKE, Action.UPDATE, Action.DELETE}),
        required_fields=("title", "content"),
        create_defaults={"priority": "medium"},
        owner_fields=("author_id", "author_name"),
    ),
}


def get_profile(kind: EntityKind) -> KindProfile:
    """Look up the profile for ``kind``."""
    return PROFILES[EntityKind(kind)]
