"""Board, card and comment entities shared by real and synthetic instances."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from kudos.errors import MalformedPayloadError

CATEGORIES = ("celebration", "thank you", "inspiration", "feedback")


class Origin(str, Enum):
    """Where an entity came from; fixed when the entity is created."""

    SERVER = "server"
    SYNTHETIC = "synthetic"
    LOCAL = "local"


def utcnow():
    return datetime.now(timezone.utc)


def parse_timestamp(value):
    """Parse an API timestamp (ISO-8601, optionally ``Z``-suffixed) into aware UTC.

    :param value: Timestamp string or ``datetime``.
    :type value: str | datetime.datetime
    :returns: Timezone-aware datetime.
    :rtype: datetime.datetime
    :raises MalformedPayloadError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise MalformedPayloadError(f"Invalid timestamp: {value!r}") from exc
    else:
        raise MalformedPayloadError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value):
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _require(payload, key, kind=str):
    if not isinstance(payload, dict):
        raise MalformedPayloadError(f"Expected a JSON object, got {type(payload).__name__}")
    value = payload.get(key)
    if not isinstance(value, kind) or isinstance(value, bool):
        raise MalformedPayloadError(f"Field {key!r} is missing or has the wrong type")
    return value


def _optional(payload, key):
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedPayloadError(f"Field {key!r} must be a string")
    return value


def _counter(payload, key):
    value = payload.get(key, 0)
    if value is None:
        return 0
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise MalformedPayloadError(f"Field {key!r} must be a non-negative integer")
    return value


@dataclass
class Board:
    id: str
    title: str
    category: str
    image: str
    description: str | None = None
    author: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    likes: int = 0
    origin: Origin = Origin.SERVER

    @classmethod
    def from_payload(cls, payload, origin=Origin.SERVER):
        """Build a board from the Backend API's JSON representation."""
        return cls(
            id=_require(payload, "id"),
            title=_require(payload, "title"),
            category=_require(payload, "category"),
            image=_require(payload, "image"),
            description=_optional(payload, "description"),
            author=_optional(payload, "author"),
            created_at=parse_timestamp(payload.get("createdAt")),
            likes=_counter(payload, "likes"),
            origin=origin,
        )

    def to_payload(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "image": self.image,
            "author": self.author,
            "createdAt": format_timestamp(self.created_at),
            "likes": self.likes,
        }

    def liked(self):
        return replace(self, likes=self.likes + 1)


@dataclass
class Card:
    id: str
    title: str
    image: str
    board_id: str
    message: str | None = None
    author: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    votes: int = 0
    likes: int = 0
    origin: Origin = Origin.SERVER

    @classmethod
    def from_payload(cls, payload, origin=Origin.SERVER):
        """Build a card from the Backend API's JSON representation."""
        return cls(
            id=_require(payload, "id"),
            title=_require(payload, "title"),
            image=_require(payload, "image"),
            board_id=_require(payload, "boardId"),
            message=_optional(payload, "message"),
            author=_optional(payload, "author"),
            created_at=parse_timestamp(payload.get("createdAt")),
            votes=_counter(payload, "votes"),
            likes=_counter(payload, "likes"),
            origin=origin,
        )

    def to_payload(self):
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "image": self.image,
            "author": self.author,
            "createdAt": format_timestamp(self.created_at),
            "votes": self.votes,
            "likes": self.likes,
            "boardId": self.board_id,
        }

    def liked(self):
        return replace(self, likes=self.likes + 1)

    def upvoted(self):
        return replace(self, votes=self.votes + 1)


@dataclass
class Comment:
    id: str
    message: str
    card_id: str
    author: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    origin: Origin = Origin.SERVER

    @classmethod
    def from_payload(cls, payload, origin=Origin.SERVER):
        """Build a comment from the Backend API's JSON representation."""
        message = _require(payload, "message")
        if not message.strip():
            raise MalformedPayloadError("Field 'message' must not be empty")
        return cls(
            id=_require(payload, "id"),
            message=message,
            card_id=_require(payload, "cardId"),
            author=_optional(payload, "author"),
            created_at=parse_timestamp(payload.get("createdAt")),
            origin=origin,
        )

    def to_payload(self):
        return {
            "id": self.id,
            "message": self.message,
            "author": self.author,
            "createdAt": format_timestamp(self.created_at),
            "cardId": self.card_id,
        }
