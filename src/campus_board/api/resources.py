"""
Typed wrappers around the campus API resource endpoints.

One ``RemoteResource`` exists per REST collection. Confessions and feedback
share the feedback collection and are told apart by the ``type`` field.
"""

from typing import Any, Dict, List, Optional, Type

from loguru import logger
from pydantic import ValidationError

from campus_board.api.client import APIError, CampusAPIClient, ResponseFormatError
from campus_board.models import LikeResult, Origin, Record, VoteDirection, VoteTally

FEEDBACK_PATH = "api/feedback"
LOST_FOUND_PATH = "api/lost-found"
ANNOUNCEMENTS_PATH = "api/announcements"


class RemoteResource:
    """Remote record source for one REST collection."""

    def __init__(self, client: CampusAPIClient, path: str, model: Type[Record]):
        """
        Args:
            client: Shared API client
            path: Collection path relative to the API base URL
            model: Record model used to parse server payloads
        """
        self.client = client
        self.path = path.strip("/")
        self.model = model

    def _item_path(self, record_id: str, action: Optional[str] = None) -> str:
        path = f"{self.path}/{record_id}"
        return f"{path}/{action}" if action else path

    def _parse(self, payload: Any) -> Record:
        if not isinstance(payload, dict):
            raise ResponseFormatError(f"Expected a record from {self.path}, got {type(payload).__name__}")
        try:
            return self.model.model_validate({**payload, "origin": Origin.REMOTE})
        except ValidationError as e:
            raise ResponseFormatError(f"Failed to parse record from {self.path}: {str(e)}")

    async def list(self, **filters: Any) -> List[Record]:  # noqa: A003
        """
        Retrieve records with server-side filtering.

        Args:
            **filters: Query parameters; None values are dropped

        Returns:
            List[Record]: Parsed records, malformed entries skipped

        Raises:
            APIError: If request fails
        """
        params = {key: value for key, value in filters.items() if value not in (None, "")}
        data = await self.client.request("GET", self.path, params=params)

        # Paginated responses nest the rows one level deeper
        if isinstance(data, dict):
            data = data.get("data", [])
        if not isinstance(data, list):
            raise ResponseFormatError(f"Failed to parse list response from {self.path}")

        records = []
        for item in data:
            try:
                records.append(self._parse(item))
            except APIError as e:
                logger.warning(f"Skipping malformed record: {e.message}")
        logger.debug(f"Fetched {len(records)} records from {self.path}")
        return records

    async def create(self, fields: Dict[str, Any]) -> Record:
        data = await self.client.request("POST", self.path, json_data=fields)
        return self._parse(data)

    async def update(self, record_id: str, fields: Dict[str, Any]) -> Record:
        data = await self.client.request("PUT", self._item_path(record_id), json_data=fields)
        return self._parse(data)

    async def delete(self, record_id: str) -> None:
        await self.client.request("DELETE", self._item_path(record_id))

    async def vote(self, record_id: str, direction: VoteDirection) -> VoteTally:
        """
        Cast a vote and return the server's tally.

        Raises:
            APIError: If request fails or the tally cannot be parsed
        """
        data = await self.client.request(
            "POST", self._item_path(record_id, "vote"), json_data={"voteType": direction.value}
        )
        try:
            return VoteTally.model_validate(data)
        except ValidationError as e:
            raise ResponseFormatError(f"Failed to parse vote response: {str(e)}")

    async def like(self, record_id: str) -> LikeResult:
        """
        Toggle the signed-in user's like and return the server's like state.

        Raises:
            APIError: If request fails or the result cannot be parsed
        """
        data = await self.client.request("POST", self._item_path(record_id, "like"))
        try:
            return LikeResult.model_validate(data)
        except ValidationError as e:
            raise ResponseFormatError(f"Failed to parse like response: {str(e)}")

    async def update_status(self, record_id: str, status: str) -> Record:
        data = await self.client.request(
            "PATCH", self._item_path(record_id, "status"), json_data={"status": status}
        )
        return self._parse(data)

    async def mark_returned(self, record_id: str) -> Record:
        data = await self.client.request("PATCH", self._item_path(record_id, "returned"))
        return self._parse(data)
