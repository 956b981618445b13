"""Album items, content references and store kinds."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from dimagram.core.errors import SerializationError


class StoreKind(str, Enum):
    """The two persisted collections."""
    QUEUE = "queue"
    ARCHIVE = "archive"


def normalize_id(raw: Any) -> str:
    """Return the canonical (string) form of an item id.

    Older documents carry numeric ids; integral numbers are migrated to their
    decimal string. Anything else that is not a non-empty string is rejected.
    """
    if isinstance(raw, bool) or raw is None:
        raise SerializationError(f"invalid item id: {raw!r}")
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float):
        if not raw.is_integer():
            raise SerializationError(f"invalid item id: {raw!r}")
        return str(int(raw))
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    raise SerializationError(f"invalid item id: {raw!r}")


@dataclass(frozen=True)
class AlbumItem:
    """One queued or archived media item."""
    id: str
    url: str
    description: Optional[str] = None
    credits: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "description": self.description or "",
            "credits": self.credits or "",
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AlbumItem":
        if not isinstance(data, dict):
            raise SerializationError(f"album item must be an object, got {type(data).__name__}")
        if "id" not in data:
            raise SerializationError("album item is missing 'id'")
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise SerializationError(f"album item {data.get('id')!r} has no url")
        description = data.get("description")
        credits = data.get("credits")
        for field, value in (("description", description), ("credits", credits)):
            if value is not None and not isinstance(value, str):
                raise SerializationError(f"album item field {field!r} must be text")
        return cls(
            id=normalize_id(data["id"]),
            url=url,
            description=description or None,
            credits=credits or None,
        )


@dataclass(frozen=True)
class ContentRef:
    """Content-addressed blob: address is sha256 hex + extension."""
    address: str
    url: str
