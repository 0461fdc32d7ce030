"""
Board service for the campus board client.

This module wires the store, API client and one mutation coordinator per
entity kind into a single session object for the presentation layer.
"""

import asyncio
from typing import Any, Dict, List, Optional

from loguru import logger

from campus_board.api import APIError, CampusAPIClient, RemoteResource
from campus_board.config import Settings, get_settings
from campus_board.core import MutationCoordinator, RecordCache, VoteLedger, get_profile
from campus_board.models import EntityKind, Record
from campus_board.storage import LocalStore, create_store


class CampusBoardService:
    """
    Session facade over the four entity kinds.

    Owns the API client and store it creates; ones passed in by the caller
    are left open on ``close()``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        user_id: Optional[str] = None,
        user_name: Optional[str] = None,
        store: Optional[LocalStore] = None,
        client: Optional[CampusAPIClient] = None,
    ):
        """
        Initialize the board service.

        Args:
            settings: Configuration, defaults to ``get_settings()``
            user_id: Signed-in user; the configured anonymous id when None
            user_name: Display name of the signed-in user
            store: Persistent local store, built from settings when None
            client: API client, built from settings when None
        """
        self.settings = settings or get_settings()
        self.user_id = user_id or self.settings.anonymous_user_id
        self.user_name = user_name
        self._owns_store = store is None
        self.store = store if store is not None else create_store(self.settings)
        self._owns_client = client is None
        self.client = client or CampusAPIClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.api_timeout,
            max_retries=self.settings.api_max_retries,
            retry_delay=self.settings.api_retry_delay,
            token=self.settings.api_token,
        )

        self.coordinators: Dict[EntityKind, MutationCoordinator] = {
            kind: self._build_coordinator(kind) for kind in EntityKind
        }
        logger.info(f"Campus board session started for user '{self.user_id}'")

    def _build_coordinator(self, kind: EntityKind) -> MutationCoordinator:
        profile = get_profile(kind)
        namespace = self.settings.storage_namespace
        return MutationCoordinator(
            profile=profile,
            cache=RecordCache(profile, self.store, namespace),
            ledger=VoteLedger(self.store, kind, namespace),
            resource=RemoteResource(self.client, profile.resource_path, profile.model),
            user_id=self.user_id,
            user_name=self.user_name,
            refresh_after_write=self.settings.refresh_after_write,
            seed_samples=self.settings.seed_samples,
            page_size=self.settings.page_size,
        )

    @property
    def confessions(self) -> MutationCoordinator:
        return self.coordinators[EntityKind.CONFESSION]

    @property
    def feedback(self) -> MutationCoordinator:
        return self.coordinators[EntityKind.FEEDBACK]

    @property
    def lost_found(self) -> MutationCoordinator:
        return self.coordinators[EntityKind.LOST_FOUND]

    @property
    def announcements(self) -> MutationCoordinator:
        return self.coordinators[EntityKind.ANNOUNCEMENT]

    async def refresh_all(self) -> Dict[EntityKind, List[Record]]:
        """
        Refresh every entity kind concurrently.

        Returns:
            Dict[EntityKind, List[Record]]: Visible collection per kind
        """
        kinds = list(self.coordinators)
        results = await asyncio.gather(*(self.coordinators[kind].refresh() for kind in kinds))
        return dict(zip(kinds, results))

    async def health_check(self) -> Dict[str, Any]:
        """
        Report whether the API is reachable.

        Returns:
            Dict[str, Any]: ``{"status": "healthy", ...}`` or ``{"status": "unavailable", "error": ...}``
        """
        try:
            health = await self.client.health_check()
        except APIError as e:
            logger.warning(f"Campus API unavailable: {e.message}")
            return {"status": "unavailable", "error": e.message}
        return {**health, "status": "healthy"}

    async def close(self) -> None:
        if self._owns_client:
            await self.client.close()
        if self._owns_store and hasattr(self.store, "close"):
            self.store.close()

    async def __aenter__(self) -> "CampusBoardService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
