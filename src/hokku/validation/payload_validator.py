"""Webhook payload validator.

Validation runs in four phases and stops at the first failure:

1. structure  - required fields are present
2. content    - text fields: encoding, unsafe characters, length
3. data       - serialized size first, then the recursive tree walk
4. business   - reserved data keys, source/type formats
"""

import json
import logging
from typing import Any, Dict, Optional

from ..config.constants import DANGEROUS_IDENTIFIER_CHARS
from ..core.exceptions import ErrorKind, PayloadValidationError
from ..models.payload import WebhookPayload
from ..models.policy import ValidationPolicy
from .data_tree import DataTreeError, DataTreeValidator
from .text import contains_unsafe_characters, is_valid_encoding

logger = logging.getLogger(__name__)


class PayloadValidator:
    """Validates webhook payloads against a ValidationPolicy."""

    def __init__(self, policy: ValidationPolicy):
        self._policy = policy
        self._tree_validator = DataTreeValidator(policy)

    @property
    def policy(self) -> ValidationPolicy:
        return self._policy

    def validate(self, payload: Optional[WebhookPayload]) -> None:
        """Run every validation phase.

        Raises:
            PayloadValidationError: on the first failing check
        """
        try:
            self.validate_structure(payload)
            self.validate_content(payload)
            self.validate_business_rules(payload)
        except PayloadValidationError as e:
            logger.info(f"Payload rejected: {e.message} (kind={e.kind.value})")
            raise

    def validate_structure(self, payload: Optional[WebhookPayload]) -> None:
        """Check that the payload exists and its required fields are present."""
        if payload is None:
            raise PayloadValidationError(
                "payload", "payload cannot be nil", ErrorKind.INVALID_PAYLOAD
            )

        if not isinstance(payload.title, str) or not payload.title.strip():
            raise PayloadValidationError(
                "title", "title is required", ErrorKind.MISSING_REQUIRED_FIELD
            )

        if payload.data is None:
            raise PayloadValidationError(
                "data", "data field is required", ErrorKind.MISSING_REQUIRED_FIELD
            )

        if not isinstance(payload.data, dict):
            raise PayloadValidationError(
                "data",
                f"data field must be an object, got {type(payload.data).__name__}",
                ErrorKind.UNSUPPORTED_VALUE_TYPE,
            )

        if len(payload.data) == 0:
            raise PayloadValidationError(
                "data", "data field cannot be empty", ErrorKind.MISSING_REQUIRED_FIELD
            )

    def validate_content(self, payload: WebhookPayload) -> None:
        """Check text fields and the data tree against the policy limits."""
        policy = self._policy

        self._validate_text("title", payload.title, 1, policy.max_title_length, required=True)

        if payload.description:
            self._validate_text("description", payload.description, 0, policy.max_desc_length)

        if payload.source:
            self._validate_text("source", payload.source, 0, policy.max_source_length)

        if payload.type:
            self._validate_text("type", payload.type, 0, policy.max_type_length)

        self._validate_data(payload.data)

    def validate_business_rules(self, payload: WebhookPayload) -> None:
        """Reject spoofed metadata keys and malformed source/type identifiers."""
        for field_name in payload.data:
            if isinstance(field_name, str) and self._policy.is_reserved_field(field_name):
                raise PayloadValidationError(
                    "data",
                    f"reserved field name '{field_name}' not allowed in data",
                    ErrorKind.RESERVED_FIELD_NAME,
                )

        if payload.source:
            self._validate_source_format(payload.source)

        if payload.type:
            self._validate_type_format(payload.type)

    def _validate_text(
        self,
        field_name: str,
        value: Any,
        min_len: int,
        max_len: int,
        required: bool = False,
    ) -> None:
        if required and (not isinstance(value, str) or not value.strip()):
            raise PayloadValidationError(
                field_name, f"{field_name} is required", ErrorKind.MISSING_REQUIRED_FIELD
            )

        if not isinstance(value, str):
            raise PayloadValidationError(
                field_name,
                f"{field_name} must be text, got {type(value).__name__}",
                ErrorKind.UNSUPPORTED_VALUE_TYPE,
            )

        if not is_valid_encoding(value):
            raise PayloadValidationError(
                field_name, f"invalid UTF-8 in {field_name}", ErrorKind.INVALID_ENCODING
            )

        if contains_unsafe_characters(value):
            raise PayloadValidationError(
                field_name, f"unsafe characters in {field_name}", ErrorKind.UNSAFE_CHARACTERS
            )

        if len(value) < min_len:
            raise PayloadValidationError(
                field_name,
                f"{field_name} too short: {len(value)} < {min_len}",
                ErrorKind.MISSING_REQUIRED_FIELD,
            )

        if len(value) > max_len:
            raise PayloadValidationError(
                field_name,
                f"{field_name} too long: {len(value)} > {max_len}",
                ErrorKind.STRING_TOO_LONG,
            )

    def _validate_data(self, data: Dict[str, Any]) -> None:
        size = self._serialized_size(data)
        if size > self._policy.max_data_size:
            raise PayloadValidationError(
                "data",
                f"data size {size} bytes exceeds limit {self._policy.max_data_size} bytes",
                ErrorKind.DATA_TOO_LARGE,
                details={"size": size, "limit": self._policy.max_data_size},
            )

        try:
            self._tree_validator.validate(data)
        except DataTreeError as e:
            raise PayloadValidationError(
                "data",
                f"in {e.location}: {e.reason}",
                e.kind,
                details={"location": e.location},
            ) from e

    @staticmethod
    def _serialized_size(data: Dict[str, Any]) -> int:
        """Size in bytes of the compact UTF-8 JSON encoding of `data`."""
        try:
            encoded = json.dumps(data, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        except RecursionError as e:
            raise PayloadValidationError(
                "data", "data field is nested too deeply to serialize", ErrorKind.NESTING_TOO_DEEP
            ) from e
        except (TypeError, ValueError) as e:
            raise PayloadValidationError(
                "data",
                f"data field cannot be serialized to JSON: {e}",
                ErrorKind.UNSUPPORTED_VALUE_TYPE,
            ) from e
        # Lone surrogates are reported by the tree walk, not here
        return len(encoded.encode("utf-8", "surrogatepass"))

    def _validate_source_format(self, source: str) -> None:
        if any(char.isspace() for char in source):
            self._format_error("source", "source cannot contain whitespace")

        if ".." in source:
            self._format_error("source", "source format invalid: consecutive dots")

        self._check_dangerous_chars("source", source)

    def _validate_type_format(self, event_type: str) -> None:
        if any(char.isspace() for char in event_type):
            self._format_error("type", "type cannot contain whitespace")

        self._check_dangerous_chars("type", event_type)

        if event_type.startswith(".") or event_type.endswith("."):
            self._format_error("type", "type cannot start or end with dot")

        if ".." in event_type:
            self._format_error("type", "type cannot contain consecutive dots")

    def _check_dangerous_chars(self, field_name: str, value: str) -> None:
        for char in DANGEROUS_IDENTIFIER_CHARS:
            if char in value:
                self._format_error(field_name, f"{field_name} contains unsafe character: {char}")

    @staticmethod
    def _format_error(field_name: str, reason: str) -> None:
        raise PayloadValidationError(
            field_name, reason, ErrorKind.INVALID_SOURCE_OR_TYPE_FORMAT
        )


def create_payload_validator(policy: ValidationPolicy) -> PayloadValidator:
    """Create payload validator."""
    return PayloadValidator(policy)


def validate_payload(payload: Optional[WebhookPayload], policy: ValidationPolicy) -> None:
    """Validate `payload` against `policy`; raises PayloadValidationError."""
    PayloadValidator(policy).validate(payload)
