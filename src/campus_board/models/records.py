"""
Pydantic models for campus board records.

Records travel between the API, the local store and the caller as camelCase
JSON objects. Fields the client does not know about are preserved so a record
read from the server can be written back to the local store unchanged.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Identifier prefixes written by older clients for records that never reached the server
LOCAL_ID_PREFIXES = ("demo_", "local_", "temp_")


def _whole_ms(value: Any) -> Any:
    # Some servers send fractional epoch milliseconds
    if isinstance(value, float):
        return int(value)
    return value


class EntityKind(str, Enum):
    """The four collections shown on the board."""
    CONFESSION = "confession"
    FEEDBACK = "feedback"
    LOST_FOUND = "lost_found"
    ANNOUNCEMENT = "announcement"


class Origin(str, Enum):
    """Where the authoritative copy of a record lives."""
    LOCAL = "local"
    REMOTE = "remote"


class VoteDirection(str, Enum):
    """Direction of a two-state vote."""
    UP = "up"
    DOWN = "down"


class Record(BaseModel):
    """
    Base model shared by every entity kind.

    ``origin`` is set when the record is constructed. Stored payloads written
    without it fall back to the identifier prefix convention.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    timestamp: int
    origin: Origin = Origin.REMOTE
    title: str = ""

    @model_validator(mode="before")
    @classmethod
    def _infer_origin(cls, data: Any) -> Any:
        if isinstance(data, dict) and "origin" not in data:
            record_id = str(data.get("id", ""))
            origin = Origin.LOCAL if record_id.startswith(LOCAL_ID_PREFIXES) else Origin.REMOTE
            data = {**data, "origin": origin}
        return data

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp_ms(cls, value: Any) -> Any:
        return _whole_ms(value)

    @property
    def is_local(self) -> bool:
        return self.origin is Origin.LOCAL

    def search_fields(self) -> List[str]:
        """Text fields matched by a free-text query."""
        return [self.title]

    def to_store(self) -> Dict[str, Any]:
        """JSON-compatible camelCase payload used by the store and the API."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def wire_keys(cls, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Translate snake_case field names to their camelCase aliases."""
        translated = {}
        for key, value in fields.items():
            field = cls.model_fields.get(key)
            translated[field.alias if field and field.alias else key] = value
        return translated

    def merged(self, fields: Dict[str, Any]) -> "Record":
        """Return a validated copy of this record with ``fields`` applied."""
        data = self.to_store()
        data.update(self.wire_keys(fields))
        return type(self).model_validate(data)


class FeedbackEntry(Record):
    """Anonymous feedback, complaint, suggestion or confession."""
    type: str = "feedback"  # noqa: A003
    content: str = ""
    category: str = "general"
    priority: str = "medium"
    status: str = "pending"
    upvotes: int = 0
    downvotes: int = 0

    def search_fields(self) -> List[str]:
        return [self.title, self.content]


class LostFoundItem(Record):
    """A lost or found item listing."""
    description: str = ""
    category: str = "other"
    status: str = "lost"
    location: str = ""
    contact_info: str = ""
    image_url: Optional[str] = None
    reporter_id: Optional[str] = None
    reporter_name: Optional[str] = None

    def search_fields(self) -> List[str]:
        return [self.title, self.description]


class Announcement(Record):
    """Campus or society announcement."""
    content: str = ""
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    society_name: Optional[str] = None
    priority: str = "medium"
    tags: List[str] = Field(default_factory=list)
    expires_at: Optional[int] = None
    views: int = 0
    likes: int = 0

    @field_validator("expires_at", mode="before")
    @classmethod
    def _expires_ms(cls, value: Any) -> Any:
        return _whole_ms(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value

    def search_fields(self) -> List[str]:
        return [self.title, self.content, *self.tags]


class VoteTally(BaseModel):
    """Up/down vote counts returned by the vote endpoint."""
    upvotes: int = 0
    downvotes: int = 0


class LikeResult(BaseModel):
    """Like state returned by the like endpoint."""
    liked: bool
    likes: int = 0
