"""Data models for hokku: payload entity, policy, results and API schemas."""

from .payload import WebhookPayload
from .policy import ValidationPolicy
from .results import PersistenceResult
from .requests import WebhookRequest
from .responses import APIResponse, HealthResponse, WebhookResponse

__all__ = [
    "WebhookPayload",
    "ValidationPolicy",
    "PersistenceResult",
    "WebhookRequest",
    "APIResponse",
    "HealthResponse",
    "WebhookResponse",
]
