"""Shared fixtures for the campus board test-suite."""

from unittest.mock import AsyncMock

import pytest

from campus_board.api import RemoteResource
from campus_board.config import Settings
from campus_board.core import MutationCoordinator, RecordCache, VoteLedger, get_profile
from campus_board.storage import MemoryStore

NOW = 1_700_000_000_000


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        api_base_url="http://test-api.com",
        api_max_retries=0,
        api_retry_delay=0,
        storage_backend="memory",
    )


@pytest.fixture
def make_resource():
    def factory(records=None):
        resource = AsyncMock(spec=RemoteResource)
        resource.list.return_value = list(records or [])
        return resource
    return factory


@pytest.fixture
def make_coordinator(store, make_resource):
    """Build a coordinator over the shared in-memory store with a mocked resource."""

    def factory(kind, user_id="user_1", resource=None, **kwargs):
        profile = get_profile(kind)
        kwargs.setdefault("clock", lambda: NOW)
        return MutationCoordinator(
            profile=profile,
            cache=RecordCache(profile, store),
            ledger=VoteLedger(store, kind),
            resource=resource if resource is not None else make_resource(),
            user_id=user_id,
            **kwargs,
        )

    return factory
