"""
Unit tests for the CampusAPIClient and RemoteResource.

Tests the API client functionality including error handling,
retry logic, and envelope parsing against an httpx mock transport.
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from campus_board.api import (
    FEEDBACK_PATH,
    LOST_FOUND_PATH,
    APIError,
    CampusAPIClient,
    RemoteResource,
    ResponseFormatError,
)
from campus_board.models import FeedbackEntry, LostFoundItem, Origin, VoteDirection, VoteTally


def make_client(handler, **kwargs):
    kwargs.setdefault("max_retries", 2)
    kwargs.setdefault("retry_delay", 0.01)
    return CampusAPIClient(
        base_url="http://test-api.com",
        timeout=10,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def envelope(data, status_code=200):
    return httpx.Response(status_code, json={"success": True, "data": data})


class TestCampusAPIClient:
    """Test cases for CampusAPIClient."""

    def test_init_default_settings(self):
        """Test client initialization with default settings."""
        with patch('campus_board.api.client.get_settings') as mock_settings:
            mock_settings.return_value.api_base_url = "http://default.com"
            mock_settings.return_value.api_timeout = 30
            mock_settings.return_value.api_max_retries = 1
            mock_settings.return_value.api_retry_delay = 0.1
            mock_settings.return_value.api_token = None

            client = CampusAPIClient()
            assert client.base_url == "http://default.com/"
            assert client.timeout == 30
            assert client.max_retries == 1

    def test_init_custom_settings(self):
        """Test client initialization with custom settings."""
        client = CampusAPIClient(base_url="http://custom.com", timeout=60, token="secret")

        assert client.base_url == "http://custom.com/"
        assert client.timeout == 60
        assert client.client.headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_request_unwraps_envelope(self):
        requests = []

        def handler(request):
            requests.append(request)
            return envelope([{"id": "a"}])

        client = make_client(handler)
        data = await client.request("GET", "api/feedback", params={"type": "confession"})

        assert data == [{"id": "a"}]
        assert str(requests[0].url) == "http://test-api.com/api/feedback?type=confession"
        await client.close()

    @pytest.mark.asyncio
    async def test_request_passes_unwrapped_body_through(self):
        client = make_client(lambda request: httpx.Response(200, json={"status": "ok"}))

        assert await client.request("GET", "health") == {"status": "ok"}
        await client.close()

    @pytest.mark.asyncio
    async def test_request_no_content(self):
        client = make_client(lambda request: httpx.Response(204))

        assert await client.request("DELETE", "api/feedback/1") is None
        await client.close()

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_raises(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"success": False, "error": "Title is required"})
        )

        with pytest.raises(APIError) as exc_info:
            await client.request("POST", "api/feedback", json_data={})

        assert exc_info.value.message == "Title is required"
        await client.close()

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, json={"success": False, "error": "Feedback not found"})

        client = make_client(handler)

        with pytest.raises(APIError) as exc_info:
            await client.request("GET", "api/feedback/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Feedback not found"
        assert len(calls) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self):
        responses = iter([
            httpx.Response(503, text="Service Unavailable"),
            envelope({"upvotes": 1, "downvotes": 0}),
        ])
        client = make_client(lambda request: next(responses))

        with patch('campus_board.api.client.asyncio.sleep', new_callable=AsyncMock) as mock_sleep:
            data = await client.request("POST", "api/feedback/1/vote", json_data={"voteType": "up"})

        assert data == {"upvotes": 1, "downvotes": 0}
        mock_sleep.assert_awaited_once_with(0.01)
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_after_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="Internal Server Error")

        client = make_client(handler)

        with patch('campus_board.api.client.asyncio.sleep', new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(APIError) as exc_info:
                await client.request("GET", "api/feedback")

        assert "HTTP 500" in str(exc_info.value)
        assert exc_info.value.status_code == 500
        assert len(calls) == 3
        assert [call.args[0] for call in mock_sleep.await_args_list] == [0.01, 0.02]
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_is_retried_then_raised(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler, max_retries=1)

        with patch('campus_board.api.client.asyncio.sleep', new_callable=AsyncMock):
            with pytest.raises(APIError) as exc_info:
                await client.request("GET", "api/feedback")

        assert "Connection refused" in exc_info.value.message
        assert exc_info.value.status_code is None
        await client.close()

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        client = make_client(lambda request: httpx.Response(401, json={"error": "Unauthorized"}))

        with pytest.raises(APIError) as exc_info:
            await client.health_check()

        assert "Health check failed" in str(exc_info.value)
        await client.close()


class TestRemoteResource:
    """Test cases for RemoteResource."""

    @pytest.mark.asyncio
    async def test_list_parses_records_and_drops_empty_filters(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return envelope([
                {"_id": "x", "title": "no id"},
                {"id": "srv_1", "timestamp": 5, "title": "Cafeteria", "type": "complaint", "upvotes": 2},
            ])

        client = make_client(handler)
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        records = await resource.list(type="complaint", status=None, search="")

        assert seen["params"] == {"type": "complaint"}
        assert [record.id for record in records] == ["srv_1"]
        assert records[0].origin is Origin.REMOTE
        assert records[0].upvotes == 2
        await client.close()

    @pytest.mark.asyncio
    async def test_list_accepts_paginated_payload(self):
        client = make_client(lambda request: envelope({
            "data": [{"id": "lf_1", "timestamp": 1, "title": "Keys", "contactInfo": "a@b.c"}],
            "pagination": {"page": 1},
        }))
        resource = RemoteResource(client, LOST_FOUND_PATH, LostFoundItem)

        records = await resource.list()

        assert records[0].contact_info == "a@b.c"
        await client.close()

    @pytest.mark.asyncio
    async def test_remote_records_stay_remote_despite_local_looking_ids(self):
        client = make_client(lambda request: envelope([{"id": "demo_conf_1", "timestamp": 1}]))
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        records = await resource.list()

        assert records[0].origin is Origin.REMOTE
        await client.close()

    @pytest.mark.asyncio
    async def test_vote_posts_direction(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return envelope({"upvotes": 7, "downvotes": 1})

        client = make_client(handler)
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        tally = await resource.vote("srv_1", VoteDirection.DOWN)

        assert tally == VoteTally(upvotes=7, downvotes=1)
        assert seen == {"method": "POST", "path": "/api/feedback/srv_1/vote", "body": {"voteType": "down"}}
        await client.close()

    @pytest.mark.asyncio
    async def test_like_parses_result(self):
        client = make_client(lambda request: envelope({"liked": True, "likes": 3}))
        resource = RemoteResource(client, "api/announcements", FeedbackEntry)

        result = await resource.like("srv_ann")

        assert (result.liked, result.likes) == (True, 3)
        await client.close()

    @pytest.mark.asyncio
    async def test_mark_returned_patches_item(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            return envelope({"id": "lf_1", "timestamp": 1, "title": "Keys", "status": "returned"})

        client = make_client(handler)
        resource = RemoteResource(client, LOST_FOUND_PATH, LostFoundItem)

        item = await resource.mark_returned("lf_1")

        assert item.status == "returned"
        assert seen == {"method": "PATCH", "path": "/api/lost-found/lf_1/returned"}
        await client.close()

    @pytest.mark.asyncio
    async def test_create_rejects_unparseable_record(self):
        client = make_client(lambda request: envelope("created"))
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        with pytest.raises(ResponseFormatError):
            await resource.create({"title": "x"})
        await client.close()

    @pytest.mark.asyncio
    async def test_create_accepts_fractional_timestamp(self):
        payload = {"id": "srv_9", "type": "confession", "title": "Hi", "timestamp": 1700000000000.5}
        client = make_client(lambda request: envelope(payload, status_code=201))
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        record = await resource.create({"title": "Hi"})

        assert record.id == "srv_9"
        assert record.timestamp == 1700000000000
        await client.close()

    @pytest.mark.asyncio
    async def test_unreadable_success_body_is_a_format_error(self):
        client = make_client(lambda request: httpx.Response(201, text="<html>created</html>"))
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        with pytest.raises(ResponseFormatError) as exc_info:
            await resource.create({"title": "x"})

        assert exc_info.value.status_code == 201
        await client.close()

    @pytest.mark.asyncio
    async def test_rejected_request_is_not_a_format_error(self):
        client = make_client(lambda request: httpx.Response(400, json={"success": False, "error": "Bad title"}))
        resource = RemoteResource(client, FEEDBACK_PATH, FeedbackEntry)

        with pytest.raises(APIError) as exc_info:
            await resource.create({"title": "x"})

        assert not isinstance(exc_info.value, ResponseFormatError)
        assert exc_info.value.message == "Bad title"
        await client.close()
