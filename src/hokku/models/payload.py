"""Webhook payload entity.

ONLY webhook payload - the record submitted for persistence together with
the metadata the system assigns to it.

Following maximum separation architecture - one file = one purpose.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils.timezone import ensure_utc, from_utc_string, to_utc_string, utc_now
from ..utils.uuid import generate_uuid_v4


@dataclass
class WebhookPayload:
    """Incoming webhook record.

    `title` and `data` are required; `description`, `source` and `type` are
    optional and treated as absent when empty. `identifier` and `created_at`
    are assigned by the system and, once set, are never overwritten.
    """

    title: str = ""
    data: Optional[Dict[str, Any]] = None
    description: str = ""
    source: str = ""
    type: str = ""
    identifier: Optional[str] = None
    created_at: Optional[datetime] = None

    def generate_id(self) -> None:
        """Assign a new UUID if none is set yet."""
        if not self.identifier:
            self.identifier = generate_uuid_v4()

    def set_timestamp(self) -> None:
        """Assign the current UTC time if no timestamp is set yet."""
        if self.created_at is None:
            self.created_at = utc_now()

    def ensure_metadata(self) -> None:
        """Assign identifier and timestamp where missing. Idempotent."""
        self.generate_id()
        self.set_timestamp()

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted document, omitting empty optional fields."""
        document: Dict[str, Any] = {"title": self.title}
        if self.description:
            document["description"] = self.description
        document["data"] = self.data
        if self.identifier:
            document["id"] = self.identifier
        if self.created_at is not None:
            document["timestamp"] = to_utc_string(self.created_at)
        if self.source:
            document["source"] = self.source
        if self.type:
            document["type"] = self.type
        return document

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> "WebhookPayload":
        """Rebuild a payload from a decoded document (e.g. a persisted file)."""
        timestamp = document.get("timestamp")
        if isinstance(timestamp, str):
            created_at = from_utc_string(timestamp)
        elif isinstance(timestamp, datetime):
            created_at = ensure_utc(timestamp)
        else:
            created_at = None

        return cls(
            title=document.get("title", ""),
            data=document.get("data"),
            description=document.get("description", ""),
            source=document.get("source", ""),
            type=document.get("type", ""),
            identifier=document.get("id"),
            created_at=created_at,
        )

    def summary(self) -> Dict[str, Any]:
        """Log-safe view of the payload: metadata and data keys, never values."""
        return {
            "id": self.identifier,
            "title": self.title,
            "description": self.description,
            "source": self.source or None,
            "type": self.type or None,
            "timestamp": to_utc_string(self.created_at) if self.created_at else None,
            "data_keys": sorted(str(k) for k in self.data) if isinstance(self.data, dict) else [],
        }

    def __str__(self) -> str:
        return json.dumps(self.summary(), ensure_ascii=False, default=str)
