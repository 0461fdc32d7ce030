"""
Optimistic mutation coordinator.

One ``MutationCoordinator`` serves one entity kind. Every user action first
decides on the record's origin: local-origin records are changed against the
local store only, remote-tracked records go to the server. Create, vote and
like fall back to local state when the server cannot be reached; update,
status changes and delete report the failure instead.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from campus_board.api.client import APIError, ResponseFormatError
from campus_board.api.resources import RemoteResource
from campus_board.core.cache import RecordCache
from campus_board.core.filters import RecordQuery, apply_query
from campus_board.core.kinds import Action, KindProfile, TallyStyle, UnknownRecordError
from campus_board.core.ledger import VoteLedger
from campus_board.core.seeds import publishable_samples
from campus_board.models import (
    MutationOutcome,
    MutationStatus,
    Notice,
    NoticeLevel,
    Origin,
    Record,
    VoteDirection,
    VoteTally,
)
from campus_board.utils.clock import now_ms

_ZERO_TALLY = {
    TallyStyle.VOTES: {"upvotes": 0, "downvotes": 0},
    TallyStyle.LIKES: {"likes": 0, "views": 0},
    TallyStyle.NONE: {},
}

# Vote and like share one lock family per record
_LOCK_FAMILY = {Action.VOTE: "tally", Action.LIKE: "tally"}


def _notice(level: NoticeLevel, message: str) -> Notice:
    return Notice(level=level, message=message)


class MutationCoordinator:
    """
    Runs user actions for one entity kind against the server and the local cache.

    Results are reported as ``MutationOutcome`` objects. Server failures never
    raise; programming errors (unsupported action, unknown record) do.
    """

    def __init__(
        self,
        profile: KindProfile,
        cache: RecordCache,
        ledger: VoteLedger,
        resource: RemoteResource,
        user_id: str = "anonymous",
        user_name: Optional[str] = None,
        refresh_after_write: bool = True,
        seed_samples: bool = True,
        page_size: Optional[int] = None,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize the coordinator.

        Args:
            profile: Kind served by this coordinator
            cache: Merged record cache of the kind
            ledger: Vote/like ledger of the kind
            resource: Remote collection of the kind
            user_id: Signed-in user, or the anonymous id
            user_name: Display name stamped on records created offline
            refresh_after_write: Refetch after a successful remote write
            seed_samples: Seed sample records into empty collections
            page_size: ``limit`` sent with every list call
            clock: Epoch-millisecond clock
        """
        self.profile = profile
        self.cache = cache
        self.ledger = ledger
        self.resource = resource
        self.user_id = user_id
        self.user_name = user_name
        self.refresh_after_write = refresh_after_write
        self.seed_samples = seed_samples
        self.page_size = page_size
        self.clock = clock
        # Lock and number of holders or waiters per (record, action family)
        self._locks: Dict[Tuple[str, str], Tuple[asyncio.Lock, int]] = {}

    @property
    def kind(self):
        return self.profile.kind

    @asynccontextmanager
    async def _locked(self, record_id: str, action: Action) -> AsyncIterator[None]:
        key = (record_id, _LOCK_FAMILY.get(action, action.value))
        lock, users = self._locks.get(key, (None, 0))
        lock = lock or asyncio.Lock()
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users == 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    def _require_record(self, record_id: str) -> Record:
        record = self.cache.get(record_id)
        if record is None:
            raise UnknownRecordError(self.kind, record_id)
        return record

    def _new_local_id(self) -> str:
        return f"local_{self.profile.id_tag}_{self.clock()}_{uuid.uuid4().hex[:6]}"

    def _outcome(self, action: Action, status: MutationStatus, **kwargs: Any) -> MutationOutcome:
        return MutationOutcome(action=action.value, status=status, **kwargs)

    # Reads

    def records(self, query: Optional[RecordQuery] = None) -> List[Record]:
        """Visible merged collection, optionally filtered on the client."""
        return apply_query(self.cache.visible(), query)

    async def refresh(self, **filters: Any) -> List[Record]:
        """
        Fetch the kind from the server and merge it with local records.

        A failed fetch keeps the last snapshot so local data stays visible.

        Args:
            **filters: Server-side list filters

        Returns:
            List[Record]: Visible merged collection
        """
        revision = self.cache.next_revision()
        params = {"limit": self.page_size, **filters, **self.profile.list_filters}
        try:
            records = await self.resource.list(**params)
        except APIError as e:
            logger.warning(f"Failed to fetch {self.kind.value} records, showing local data: {e.message}")
        else:
            records = [record for record in records if not self.profile.rejects_remote(record)]
            if self.cache.replace_remote(records, revision):
                self.cache.prune_confirmed()

        self._reseed()
        return self.cache.visible()

    async def _refetch(self) -> None:
        if self.refresh_after_write:
            await self.refresh()

    def _reseed(self) -> None:
        if not self.seed_samples:
            return
        # Samples reuse fixed ids, so votes left on an earlier copy must not carry over
        for record in self.cache.ensure_seeded(self.clock()):
            self.ledger.forget(self.user_id, record.id)

    def _local_record(self, payload: Dict[str, Any]) -> Record:
        owner = {}
        if self.profile.owner_fields:
            id_field, name_field = self.profile.owner_fields
            owner = self.profile.model.wire_keys({id_field: self.user_id, name_field: self.user_name})
        return self.profile.model.model_validate({
            **owner,
            **payload,
            **_ZERO_TALLY[self.profile.tally],
            "id": self._new_local_id(),
            "timestamp": self.clock(),
            "origin": Origin.LOCAL,
        })

    # Create

    async def create(self, fields: Dict[str, Any]) -> MutationOutcome:
        """
        Create a record on the server, or locally when the server is unavailable.

        Args:
            fields: Record fields, snake_case or camelCase

        Returns:
            MutationOutcome: success with the server record, degraded with a
            local record, or failed when fields are missing or invalid
        """
        self.profile.require(Action.CREATE)

        fields = {key: value.strip() if isinstance(value, str) else value for key, value in fields.items()}
        missing = [name for name in self.profile.required_fields if not str(fields.get(name) or "").strip()]
        if missing:
            return self._outcome(
                Action.CREATE,
                MutationStatus.FAILED,
                notice=_notice(NoticeLevel.ERROR, f"Missing required fields: {', '.join(missing)}"),
            )

        payload = {
            **self.profile.create_defaults,
            **self.profile.model.wire_keys(fields),
            **self.profile.list_filters,
        }

        try:
            local = self._local_record(payload)
        except ValidationError as e:
            invalid = sorted({str(error["loc"][0]) for error in e.errors() if error["loc"]})
            return self._outcome(
                Action.CREATE,
                MutationStatus.FAILED,
                notice=_notice(NoticeLevel.ERROR, f"Invalid fields: {', '.join(invalid)}"),
            )

        # Send the caller's fields in their validated form, except those the local copy assigns
        normalized = local.to_store()
        assigned = {"id", "timestamp", "origin", *_ZERO_TALLY[self.profile.tally]}
        payload = {
            key: value if key in assigned else normalized.get(key, value)
            for key, value in payload.items()
        }

        try:
            record = await self.resource.create(payload)
        except ResponseFormatError as e:
            logger.warning(f"Server stored the {self.kind.value} but its reply could not be read: {e.message}")
            await self._refetch()
            return self._outcome(
                Action.CREATE,
                MutationStatus.SUCCESS,
                notice=_notice(NoticeLevel.INFO, f"{self.profile.label} posted successfully."),
            )
        except APIError as e:
            logger.warning(f"Failed to create {self.kind.value} on server, saving locally: {e.message}")
            self.cache.prepend_local(local)
            return self._outcome(
                Action.CREATE,
                MutationStatus.DEGRADED,
                record_id=local.id,
                record=local,
                notice=_notice(NoticeLevel.WARNING, f"{self.profile.label} saved locally (server unavailable)."),
            )

        self.cache.prepend_local(record)
        logger.info(f"Created {self.kind.value} {record.id}")
        await self._refetch()
        return self._outcome(
            Action.CREATE,
            MutationStatus.SUCCESS,
            record_id=record.id,
            record=self.cache.get(record.id) or record,
            notice=_notice(NoticeLevel.INFO, f"{self.profile.label} posted successfully."),
        )

    # Vote / like

    async def vote(self, record_id: str, direction: VoteDirection) -> MutationOutcome:
        """
        Toggle the user's vote on a record.

        Votes are serialized per record, so a vote issued while another is in
        flight observes that vote's result.

        Args:
            record_id: Record to vote on
            direction: ``up`` or ``down``

        Returns:
            MutationOutcome: carries the new tally and the user's vote
        """
        self.profile.require(Action.VOTE)
        direction = VoteDirection(direction)

        async with self._locked(record_id, Action.VOTE):
            record = self._require_record(record_id)
            tally = VoteTally(upvotes=record.upvotes, downvotes=record.downvotes)

            if record.is_local:
                tally, state = self.ledger.apply_vote(self.user_id, record_id, direction, tally)
                updated = self.cache.patch(record_id, tally.model_dump(), self.cache.next_revision(), persist=True)
                return self._outcome(
                    Action.VOTE, MutationStatus.SUCCESS,
                    record_id=record_id, record=updated, tally=tally, vote=state,
                )

            revision = self.cache.next_revision()
            previous = self.ledger.get_vote(self.user_id, record_id)
            try:
                tally = await self.resource.vote(record_id, direction)
            except APIError as e:
                logger.warning(f"Failed to vote on {record_id}, counting locally: {e.message}")
                current = self.cache.get(record_id) or record
                bump = {
                    "upvotes": current.upvotes + int(direction is VoteDirection.UP),
                    "downvotes": current.downvotes + int(direction is VoteDirection.DOWN),
                }
                updated = self.cache.patch(record_id, bump, revision, persist=False)
                return self._outcome(
                    Action.VOTE, MutationStatus.DEGRADED,
                    record_id=record_id, record=updated, tally=VoteTally(**bump), vote=previous,
                    notice=_notice(NoticeLevel.WARNING, "Vote saved locally (server unavailable)."),
                )

            state = None if previous is direction else direction
            self.ledger.record_vote(self.user_id, record_id, state)
            updated = self.cache.patch(record_id, tally.model_dump(), revision, persist=False)
            logger.debug(f"Vote on {record_id} accepted: {tally.upvotes} up, {tally.downvotes} down")
            return self._outcome(
                Action.VOTE, MutationStatus.SUCCESS,
                record_id=record_id, record=updated, tally=tally, vote=state,
            )

    async def toggle_like(self, record_id: str) -> MutationOutcome:
        """Toggle the user's like on a record."""
        self.profile.require(Action.LIKE)

        async with self._locked(record_id, Action.LIKE):
            record = self._require_record(record_id)

            if record.is_local:
                result = self.ledger.toggle_like(self.user_id, record_id, record.likes)
                updated = self.cache.patch(
                    record_id, {"likes": result.likes}, self.cache.next_revision(), persist=True
                )
                return self._outcome(
                    Action.LIKE, MutationStatus.SUCCESS,
                    record_id=record_id, record=updated, likes=result.likes, liked=result.liked,
                )

            revision = self.cache.next_revision()
            try:
                result = await self.resource.like(record_id)
            except APIError as e:
                logger.warning(f"Failed to like {record_id}, counting locally: {e.message}")
                current = self.cache.get(record_id) or record
                likes = current.likes + 1
                updated = self.cache.patch(record_id, {"likes": likes}, revision, persist=False)
                return self._outcome(
                    Action.LIKE, MutationStatus.DEGRADED,
                    record_id=record_id, record=updated, likes=likes,
                    liked=self.ledger.is_liked(self.user_id, record_id),
                    notice=_notice(NoticeLevel.WARNING, "Like saved locally (server unavailable)."),
                )

            self.ledger.record_like(self.user_id, record_id, result.liked)
            updated = self.cache.patch(record_id, {"likes": result.likes}, revision, persist=False)
            return self._outcome(
                Action.LIKE, MutationStatus.SUCCESS,
                record_id=record_id, record=updated, likes=result.likes, liked=result.liked,
            )

    # Update / status / delete

    async def _write_through(
        self,
        action: Action,
        record_id: str,
        local_fields: Dict[str, Any],
        remote_call: Callable[[], Any],
        failure: str,
    ) -> MutationOutcome:
        async with self._locked(record_id, action):
            record = self._require_record(record_id)

            if record.is_local:
                updated = self.cache.update_local(record_id, local_fields)
                return self._outcome(action, MutationStatus.SUCCESS, record_id=record_id, record=updated)

            try:
                updated = await remote_call()
            except APIError as e:
                logger.warning(f"{failure} ({record_id}): {e.message}")
                return self._outcome(
                    action, MutationStatus.FAILED, record_id=record_id,
                    notice=_notice(NoticeLevel.ERROR, f"{failure}: {e.message}"),
                )

            # Keep a persisted copy of a freshly created record in step with the server
            self.cache.update_local(record_id, updated.to_store())

        await self._refetch()
        return self._outcome(
            action, MutationStatus.SUCCESS,
            record_id=record_id, record=self.cache.get(record_id) or updated,
        )

    async def update(self, record_id: str, fields: Dict[str, Any]) -> MutationOutcome:
        """Edit a record's fields."""
        self.profile.require(Action.UPDATE)
        fields = self.profile.model.wire_keys(fields)
        return await self._write_through(
            Action.UPDATE, record_id, fields,
            lambda: self.resource.update(record_id, fields),
            f"Failed to update {self.profile.label.lower()}",
        )

    async def update_status(self, record_id: str, status: str) -> MutationOutcome:
        """Change the moderation status of a feedback entry."""
        self.profile.require(Action.UPDATE_STATUS)
        return await self._write_through(
            Action.UPDATE_STATUS, record_id, {"status": status},
            lambda: self.resource.update_status(record_id, status),
            "Failed to update status",
        )

    async def mark_returned(self, record_id: str) -> MutationOutcome:
        """Mark a lost or found item as returned to its owner."""
        self.profile.require(Action.MARK_RETURNED)
        return await self._write_through(
            Action.MARK_RETURNED, record_id, {"status": "returned"},
            lambda: self.resource.mark_returned(record_id),
            "Failed to mark item as returned",
        )

    async def delete(self, record_id: str) -> MutationOutcome:
        """
        Delete a record.

        Local-origin records are removed from the store at once. Remote-tracked
        records stay visible until the server confirms and the collection is
        fetched again.
        """
        self.profile.require(Action.DELETE)

        async with self._locked(record_id, Action.DELETE):
            record = self._require_record(record_id)

            if record.is_local:
                self.cache.remove_local(record_id)
                self.ledger.forget(self.user_id, record_id)
                self._reseed()
                return self._outcome(
                    Action.DELETE, MutationStatus.SUCCESS, record_id=record_id,
                    notice=_notice(NoticeLevel.INFO, f"{self.profile.label} deleted."),
                )

            try:
                await self.resource.delete(record_id)
            except APIError as e:
                logger.warning(f"Failed to delete {record_id}: {e.message}")
                return self._outcome(
                    Action.DELETE, MutationStatus.FAILED, record_id=record_id,
                    notice=_notice(NoticeLevel.ERROR, f"Failed to delete {self.profile.label.lower()}: {e.message}"),
                )

            self.cache.remove_local(record_id)
            logger.info(f"Deleted {self.kind.value} {record_id}")

        await self._refetch()
        return self._outcome(
            Action.DELETE, MutationStatus.SUCCESS, record_id=record_id,
            notice=_notice(NoticeLevel.INFO, f"{self.profile.label} deleted."),
        )

    # Samples

    async def publish_samples(self) -> int:
        """
        Post the kind's sample records to the server.

        Individual failures are logged and skipped.

        Returns:
            int: Number of samples the server accepted
        """
        self.profile.require(Action.CREATE)

        published = 0
        for sample in publishable_samples(self.kind, self.clock()):
            try:
                await self.resource.create({**sample, **self.profile.list_filters})
                published += 1
            except APIError as e:
                logger.warning(f"Failed to publish sample '{sample.get('title')}': {e.message}")

        logger.info(f"Published {published} sample {self.kind.value} records")
        if published:
            await self._refetch()
        return published
