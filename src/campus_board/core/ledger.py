"""
Per-user vote and like ledger.

Each user holds one map per entity kind from record id to vote state
(``up``/``down``) or like state. Entries for local-origin records are written
to the local store. Entries for remote-tracked records are held in memory
only, since the server never reports them back.
"""

from typing import Any, Dict, Optional, Tuple

from loguru import logger

from campus_board.models import EntityKind, LikeResult, VoteDirection, VoteTally
from campus_board.storage.base_store import LocalStore, read_json, write_json

# Pending entries use None to mark a retracted vote or like
_Pending = Dict[str, Any]


def tally_after_vote(
    tally: VoteTally,
    previous: Optional[VoteDirection],
    requested: VoteDirection,
) -> Tuple[VoteTally, Optional[VoteDirection]]:
    """
    Apply a two-state vote with toggle semantics.

    Repeating the stored direction retracts the vote. A different direction
    moves the vote, releasing the previous one. Counts never drop below zero.

    Args:
        tally: Current tally of the record
        previous: The user's stored vote, if any
        requested: Direction the user asked for

    Returns:
        Tuple of the new tally and the user's new vote (None when retracted)
    """
    counts = {VoteDirection.UP: tally.upvotes, VoteDirection.DOWN: tally.downvotes}

    if previous is requested:
        counts[requested] = max(0, counts[requested] - 1)
        state = None
    else:
        if previous is not None:
            counts[previous] = max(0, counts[previous] - 1)
        counts[requested] += 1
        state = requested

    return VoteTally(upvotes=counts[VoteDirection.UP], downvotes=counts[VoteDirection.DOWN]), state


def likes_after_toggle(likes: int, liked: bool) -> LikeResult:
    """Flip a like. ``liked`` is the user's state before the toggle."""
    if liked:
        return LikeResult(liked=False, likes=max(0, likes - 1))
    return LikeResult(liked=True, likes=max(0, likes) + 1)


class VoteLedger:
    """Vote and like state of every user for one entity kind."""

    def __init__(self, store: LocalStore, kind: EntityKind, namespace: str = "campus_board"):
        self.store = store
        self.kind = EntityKind(kind)
        self.namespace = namespace
        self._pending: Dict[str, _Pending] = {}

    def votes_key(self, user_id: str) -> str:
        return f"{self.namespace}:votes:{self.kind.value}:{user_id}"

    def likes_key(self, user_id: str) -> str:
        return f"{self.namespace}:likes:{self.kind.value}:{user_id}"

    def _entries(self, key: str) -> Dict[str, Any]:
        entries = read_json(self.store, key, {})
        for record_id, state in self._pending.get(key, {}).items():
            if state is None:
                entries.pop(record_id, None)
            else:
                entries[record_id] = state
        return entries

    def _write(self, key: str, record_id: str, state: Any, durable: bool) -> None:
        if not durable:
            self._pending.setdefault(key, {})[record_id] = state
            return

        self._pending.get(key, {}).pop(record_id, None)
        entries = read_json(self.store, key, {})
        if state is None:
            entries.pop(record_id, None)
        else:
            entries[record_id] = state
        write_json(self.store, key, entries)

    # Reads

    def get_vote(self, user_id: str, record_id: str) -> Optional[VoteDirection]:
        """Current vote of ``user_id`` on ``record_id``."""
        state = self._entries(self.votes_key(user_id)).get(record_id)
        try:
            return VoteDirection(state) if state is not None else None
        except ValueError:
            logger.warning(f"Ignoring unknown vote state '{state}' for {record_id}")
            return None

    def is_liked(self, user_id: str, record_id: str) -> bool:
        return self._entries(self.likes_key(user_id)).get(record_id) is True

    def votes(self, user_id: str) -> Dict[str, VoteDirection]:
        """Every valid vote of ``user_id``."""
        votes = {}
        for record_id, state in self._entries(self.votes_key(user_id)).items():
            if state in (VoteDirection.UP.value, VoteDirection.DOWN.value):
                votes[record_id] = VoteDirection(state)
        return votes

    # Transitions

    def apply_vote(
        self,
        user_id: str,
        record_id: str,
        requested: VoteDirection,
        tally: VoteTally,
        durable: bool = True,
    ) -> Tuple[VoteTally, Optional[VoteDirection]]:
        """
        Toggle a vote against the user's latest stored state.

        Args:
            user_id: Voting user
            record_id: Record voted on
            requested: Requested direction
            tally: The record's current tally
            durable: Persist the new entry to the local store

        Returns:
            Tuple of the new tally and the user's new vote
        """
        requested = VoteDirection(requested)
        previous = self.get_vote(user_id, record_id)
        new_tally, state = tally_after_vote(tally, previous, requested)
        self._write(self.votes_key(user_id), record_id, state.value if state else None, durable)
        return new_tally, state

    def toggle_like(self, user_id: str, record_id: str, likes: int, durable: bool = True) -> LikeResult:
        """Flip the user's like on ``record_id`` and return the new like count."""
        result = likes_after_toggle(likes, self.is_liked(user_id, record_id))
        self._write(self.likes_key(user_id), record_id, True if result.liked else None, durable)
        return result

    def record_vote(self, user_id: str, record_id: str, state: Optional[VoteDirection]) -> None:
        """Remember an intended vote on a remote-tracked record."""
        self._write(self.votes_key(user_id), record_id, state.value if state else None, durable=False)

    def record_like(self, user_id: str, record_id: str, liked: bool) -> None:
        """Remember a server-confirmed like state on a remote-tracked record."""
        self._write(self.likes_key(user_id), record_id, True if liked else None, durable=False)

    def forget(self, user_id: str, record_id: str) -> None:
        """Drop the user's vote and like on ``record_id``, stored and pending."""
        for key in (self.votes_key(user_id), self.likes_key(user_id)):
            self._pending.get(key, {}).pop(record_id, None)
            entries = read_json(self.store, key, {})
            if entries.pop(record_id, None) is not None:
                write_json(self.store, key, entries)
