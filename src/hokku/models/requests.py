"""Webhook request model.

ONLY webhook requests - decodes the HTTP body into the shape the core
expects. Limits and content rules are enforced by the payload validator,
not here, so every rejection carries the same typed error.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from .payload import WebhookPayload


class WebhookRequest(BaseModel):
    """Request model for submitting a webhook payload."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "Order created",
                "description": "Order 1042 was placed",
                "data": {"order_id": 1042, "items": [{"sku": "A-1", "qty": 2}]},
                "source": "shop.example.com",
                "type": "order.created",
            }
        },
    )

    title: str = Field(..., description="Human readable title, used in the file name")
    data: Dict[str, Any] = Field(..., description="Arbitrary business content")
    description: str = Field(default="", description="Optional longer description")
    source: str = Field(default="", description="Optional origin of the webhook")
    type: str = Field(default="", description="Optional event type, e.g. order.created")

    def to_payload(self) -> WebhookPayload:
        """Convert to the domain payload."""
        return WebhookPayload(
            title=self.title,
            data=self.data,
            description=self.description,
            source=self.source,
            type=self.type,
        )
