"""
Reconciling record cache.

Merges the last server snapshot of a collection with the records held in the
persistent local store. Remote-tracked records may carry in-memory overrides
(tallies awaiting server confirmation). Each override and snapshot carries the
revision at which its request was dispatched, so a response that arrives late
never replaces newer state.
"""

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from loguru import logger
from pydantic import ValidationError

from campus_board.core.kinds import KindProfile
from campus_board.core.seeds import sample_records
from campus_board.models import Origin, Record
from campus_board.storage.base_store import LocalStore, read_json, write_json


def _unique(records: Iterable[Record]) -> List[Record]:
    seen = set()
    unique = []
    for record in records:
        if record.id not in seen:
            seen.add(record.id)
            unique.append(record)
    return unique


def merge_records(remote: Sequence[Record], local: Sequence[Record]) -> List[Record]:
    """
    Merge remote and local records of one kind into a single collection.

    Every remote record is kept; a local record is kept only when no remote
    record shares its id. The result is ordered newest first. Python's sort is
    stable, so records with equal timestamps keep their input order.

    Args:
        remote: Records fetched from the server
        local: Records read from the local store

    Returns:
        Deduplicated records sorted by timestamp descending
    """
    remote = _unique(remote)
    remote_ids = {record.id for record in remote}
    combined = remote + [record for record in _unique(local) if record.id not in remote_ids]
    return sorted(combined, key=lambda record: record.timestamp, reverse=True)


@dataclass
class _Override:
    revision: int
    fields: Dict[str, Any]


class RecordCache:
    """
    Merged view of one entity kind.

    The local list is re-read from the store before every write so that the
    write always starts from the latest persisted state.
    """

    def __init__(self, profile: KindProfile, store: LocalStore, namespace: str = "campus_board"):
        """
        Initialize the cache.

        Args:
            profile: Kind served by this cache
            store: Persistent local store
            namespace: Prefix for store keys
        """
        self.profile = profile
        self.store = store
        self.key = f"{namespace}:records:{profile.kind.value}"
        self._remote: List[Record] = []
        self._overrides: Dict[str, _Override] = {}
        self._revisions = itertools.count(1)
        self._fetch_revision = 0

    # Revisions

    def next_revision(self) -> int:
        """Stamp for a request about to be dispatched."""
        return next(self._revisions)

    def is_stale(self, revision: int) -> bool:
        """True when a newer fetch has already been applied."""
        return revision < self._fetch_revision

    # Local store

    def load_local(self) -> List[Record]:
        """Read the locally persisted records, skipping malformed entries."""
        records = []
        for payload in read_json(self.store, self.key, []):
            if not isinstance(payload, dict):
                logger.warning(f"Skipping non-object entry in '{self.key}'")
                continue
            try:
                records.append(self.profile.model.model_validate(payload))
            except ValidationError as e:
                logger.warning(f"Skipping malformed record in '{self.key}': {e.error_count()} errors")
        return records

    def _write_local(self, records: Sequence[Record]) -> None:
        write_json(self.store, self.key, [record.to_store() for record in records])

    def mutate_local(self, change: Callable[[List[Record]], List[Record]]) -> List[Record]:
        """Apply ``change`` to the latest local list and persist the result."""
        updated = change(self.load_local())
        self._write_local(updated)
        return updated

    def prepend_local(self, record: Record) -> None:
        """Persist ``record`` at the head of the local list, replacing any copy."""
        self.mutate_local(lambda records: [record] + [r for r in records if r.id != record.id])

    def update_local(self, record_id: str, fields: Dict[str, Any]) -> Optional[Record]:
        """Apply ``fields`` to a locally persisted record and return the new copy."""
        updated: List[Record] = []

        def change(records: List[Record]) -> List[Record]:
            result = []
            for record in records:
                if record.id == record_id:
                    record = record.merged(fields)
                    updated.append(record)
                result.append(record)
            return result

        self.mutate_local(change)
        return updated[0] if updated else None

    def remove_local(self, record_id: str) -> bool:
        """Drop a record from the local list. Returns whether it was present."""
        removed = []

        def change(records: List[Record]) -> List[Record]:
            kept = [record for record in records if record.id != record_id]
            removed.append(len(kept) != len(records))
            return kept

        self.mutate_local(change)
        return removed[0]

    # Remote snapshot

    def replace_remote(self, records: Sequence[Record], revision: int) -> bool:
        """
        Install a freshly fetched snapshot.

        Overrides dispatched before the fetch are dropped since the snapshot
        already reflects them. A snapshot older than the current one is ignored.

        Returns:
            True when the snapshot was applied
        """
        if revision < self._fetch_revision:
            logger.debug(f"Ignoring stale {self.profile.kind.value} snapshot (revision {revision})")
            return False

        self._fetch_revision = revision
        self._remote = [record.model_copy(update={"origin": Origin.REMOTE}) for record in records]
        self._overrides = {
            record_id: override
            for record_id, override in self._overrides.items()
            if override.revision > revision
        }
        return True

    def prune_confirmed(self) -> int:
        """
        Drop stored copies of server records that the current snapshot holds.

        Server records are persisted after a create so they survive a reload
        before the next fetch; once fetched they are no longer needed locally.
        """
        remote_ids = {record.id for record in self._remote}
        pruned = []

        def change(records: List[Record]) -> List[Record]:
            kept = []
            for record in records:
                if not record.is_local and record.id in remote_ids:
                    pruned.append(record.id)
                else:
                    kept.append(record)
            return kept

        if remote_ids:
            self.mutate_local(change)
        return len(pruned)

    def patch(
        self,
        record_id: str,
        fields: Dict[str, Any],
        revision: int,
        persist: bool,
    ) -> Optional[Record]:
        """
        Apply ``fields`` to a record.

        Args:
            record_id: Record to change
            fields: snake_case or camelCase field values
            revision: Dispatch revision of the change
            persist: Write through to the local store (local-origin records)
                instead of holding the change in memory

        Returns:
            The record as now visible, or None if it is unknown or the change is stale
        """
        if persist:
            self.update_local(record_id, fields)
            return self.get(record_id)

        if self.is_stale(revision):
            logger.debug(f"Ignoring stale change to {record_id} (revision {revision})")
            return None

        current = self._overrides.get(record_id)
        if current is not None and current.revision > revision:
            return self.get(record_id)

        merged_fields = dict(current.fields) if current else {}
        merged_fields.update(fields)
        self._overrides[record_id] = _Override(revision, merged_fields)
        return self.get(record_id)

    # Views

    def records(self) -> List[Record]:
        """Merged collection with in-memory overrides applied."""
        merged = merge_records(self._remote, self.load_local())
        if not self._overrides:
            return merged
        return [
            record.merged(self._overrides[record.id].fields) if record.id in self._overrides else record
            for record in merged
        ]

    def visible(self) -> List[Record]:
        """Merged collection without the records this kind hides."""
        return [record for record in self.records() if not self.profile.excludes(record)]

    def get(self, record_id: str) -> Optional[Record]:
        for record in self.records():
            if record.id == record_id:
                return record
        return None

    # Bootstrap

    def ensure_seeded(self, now: int) -> List[Record]:
        """
        Seed the kind's sample records when nothing visible remains.

        Samples whose ids are already stored are skipped, so repeated calls
        never duplicate identifiers.

        Args:
            now: Reference time in epoch milliseconds

        Returns:
            The records added
        """
        if self.visible():
            return []

        added = []

        def change(records: List[Record]) -> List[Record]:
            present = {record.id for record in records}
            for payload in sample_records(self.profile.kind, now):
                if payload["id"] not in present:
                    added.append(self.profile.model.model_validate(payload))
            return records + added

        self.mutate_local(change)
        if added:
            logger.info(f"Seeded {len(added)} sample {self.profile.kind.value} records")
        return added
