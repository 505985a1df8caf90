"""Recursive validation of the free-form `data` tree.

Each value is classified into a closed set of kinds and checked against the
policy limits. The walk carries an explicit depth counter, so the nesting
bound is enforced long before the interpreter stack is at risk.
"""

import math
from enum import Enum
from typing import Any

from ..core.exceptions import ErrorKind
from ..models.policy import ValidationPolicy
from .text import contains_unsafe_characters, is_valid_encoding


class ValueKind(str, Enum):
    """Kinds of value allowed in a data tree."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> ValueKind:
    """Map a Python value onto its ValueKind."""
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, int):
        return ValueKind.NUMBER
    if isinstance(value, float):
        # NaN and infinities have no JSON representation
        return ValueKind.NUMBER if math.isfinite(value) else ValueKind.UNSUPPORTED
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.UNSUPPORTED


class DataTreeError(Exception):
    """Failure inside the data tree, with the location where it happened."""

    def __init__(self, reason: str, kind: ErrorKind, location: str):
        super().__init__(reason)
        self.reason = reason
        self.kind = kind
        self.location = location


class DataTreeValidator:
    """Walks a data tree enforcing depth, size and charset limits."""

    def __init__(self, policy: ValidationPolicy):
        self._policy = policy

    def validate(self, value: Any, location: str = "data") -> None:
        """Validate a whole tree; raises DataTreeError on the first problem."""
        self._walk(value, 0, location)

    def _walk(self, value: Any, depth: int, location: str) -> None:
        policy = self._policy
        if depth > policy.max_nesting_depth:
            raise DataTreeError(
                f"nesting depth {depth} exceeds maximum {policy.max_nesting_depth}",
                ErrorKind.NESTING_TOO_DEEP,
                location,
            )

        kind = classify(value)

        if kind is ValueKind.STRING:
            self._check_string(value, location)
        elif kind is ValueKind.OBJECT:
            self._check_object(value, depth, location)
        elif kind is ValueKind.ARRAY:
            self._check_array(value, depth, location)
        elif kind in (ValueKind.NUMBER, ValueKind.BOOLEAN, ValueKind.NULL):
            return
        else:
            reason = (
                f"non-finite number not allowed: {value!r}"
                if isinstance(value, float)
                else f"unsupported data type: {type(value).__name__}"
            )
            raise DataTreeError(
                reason,
                ErrorKind.UNSUPPORTED_VALUE_TYPE,
                location,
            )

    def _check_string(self, value: str, location: str) -> None:
        limit = self._policy.max_string_length
        if len(value) > limit:
            raise DataTreeError(
                f"string length {len(value)} exceeds maximum {limit}",
                ErrorKind.STRING_TOO_LONG,
                location,
            )
        if not is_valid_encoding(value):
            raise DataTreeError("invalid UTF-8 string", ErrorKind.INVALID_ENCODING, location)
        if contains_unsafe_characters(value):
            raise DataTreeError(
                "unsafe characters in string value", ErrorKind.UNSAFE_CHARACTERS, location
            )

    def _check_object(self, value: dict, depth: int, location: str) -> None:
        limit = self._policy.max_object_keys
        if len(value) > limit:
            raise DataTreeError(
                f"object key count {len(value)} exceeds maximum {limit}",
                ErrorKind.TOO_MANY_KEYS,
                location,
            )

        for key, sub_value in value.items():
            self._check_key(key, location)
            self._walk(sub_value, depth + 1, f"{location}.{key}")

    def _check_key(self, key: Any, location: str) -> None:
        if not isinstance(key, str):
            raise DataTreeError(
                f"object key must be a string, got {type(key).__name__}",
                ErrorKind.INVALID_KEY,
                location,
            )
        limit = self._policy.max_key_length
        if len(key) > limit:
            raise DataTreeError(
                f"object key '{key[:20]}...' too long ({len(key)} > {limit})",
                ErrorKind.INVALID_KEY,
                location,
            )
        if not is_valid_encoding(key):
            raise DataTreeError(
                "invalid UTF-8 in object key", ErrorKind.INVALID_KEY, location
            )

    def _check_array(self, value: list, depth: int, location: str) -> None:
        limit = self._policy.max_array_length
        if len(value) > limit:
            raise DataTreeError(
                f"array length {len(value)} exceeds maximum {limit}",
                ErrorKind.ARRAY_TOO_LONG,
                location,
            )

        for index, element in enumerate(value):
            self._walk(element, depth + 1, f"{location}[{index}]")
