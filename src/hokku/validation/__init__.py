"""Structural and content validation of webhook payloads."""

from .data_tree import DataTreeValidator, ValueKind, classify
from .payload_validator import PayloadValidator, create_payload_validator, validate_payload

__all__ = [
    "DataTreeValidator",
    "PayloadValidator",
    "ValueKind",
    "classify",
    "create_payload_validator",
    "validate_payload",
]
