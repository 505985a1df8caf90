"""Security-focused path and file name utilities.

Turns untrusted strings into filesystem-safe names and checks that paths
stay inside a storage root. Everything here is pure and works lexically:
no function touches the filesystem.
"""

import logging
import os
import re
import secrets
from typing import Optional, Union

from ..config.constants import RESERVED_DEVICE_NAMES, SecurityLimits
from ..core.exceptions import ErrorKind, SecurityError
from .sanitized_name import SanitizedName

logger = logging.getLogger(__name__)

PLACEHOLDER = SecurityLimits.PLACEHOLDER

# Separators of every platform, drive separator, shell/Windows specials,
# space and all C0 control characters
UNSAFE_CHARS = re.compile(r'[<>:"/\\|?* \x00-\x1f]')
PLACEHOLDER_RUNS = re.compile(re.escape(PLACEHOLDER) + r"+")
SEGMENT_SEPARATORS = re.compile(r"[\\/]+")


def _as_text(raw: Union[str, bytes], path: Optional[str] = None) -> str:
    """Return `raw` as text, rejecting malformed encodings."""
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SecurityError(
                "invalid text encoding", ErrorKind.UNSAFE_CHARACTERS, path=path
            ) from e
    if not isinstance(raw, str):
        raise SecurityError(
            f"expected text, got {type(raw).__name__}", ErrorKind.INVALID_NAME, path=path
        )
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SecurityError(
            "invalid text encoding", ErrorKind.UNSAFE_CHARACTERS, path=path
        ) from e
    return raw


def sanitize_name(raw: Union[str, bytes]) -> SanitizedName:
    """Create a safe file name from user input.

    Unsafe characters become `_`, runs of `_` collapse, leading and trailing
    `_`/`.` are stripped (no hidden files, no trailing-dot tricks), reserved
    device names get a `_` prefix and the result is cut to 255 UTF-8 bytes,
    keeping a short extension when there is one.

    Raises:
        SecurityError: EmptyInput for blank input, UnsafeCharacters for
            malformed encoding, InvalidName when nothing usable remains
    """
    if raw is None or (isinstance(raw, (str, bytes)) and not raw):
        raise SecurityError("empty filename", ErrorKind.EMPTY_INPUT)

    text = _as_text(raw)
    cleaned = text.strip()
    if not cleaned:
        raise SecurityError("empty filename", ErrorKind.EMPTY_INPUT)

    sanitized = UNSAFE_CHARS.sub(PLACEHOLDER, cleaned)
    sanitized = PLACEHOLDER_RUNS.sub(PLACEHOLDER, sanitized)
    sanitized = sanitized.strip(PLACEHOLDER + ".")

    if not sanitized:
        raise SecurityError(
            f"invalid filename: nothing left after sanitizing {cleaned!r}",
            ErrorKind.INVALID_NAME,
        )

    if sanitized.split(".", 1)[0].upper() in RESERVED_DEVICE_NAMES:
        sanitized = PLACEHOLDER + sanitized

    if _encoded_length(sanitized) > SecurityLimits.MAX_FILENAME_LENGTH:
        sanitized = _truncate(sanitized)

    return SanitizedName(sanitized)


def _encoded_length(name: str) -> int:
    return len(name.encode("utf-8"))


def _cut_to_bytes(text: str, limit: int) -> str:
    """Longest prefix of `text` whose UTF-8 encoding fits in `limit` bytes."""
    return text.encode("utf-8")[:limit].decode("utf-8", "ignore")


def _truncate(name: str) -> str:
    """Cut a name to the maximum byte length, preserving a short extension."""
    limit = SecurityLimits.MAX_FILENAME_LENGTH
    base, dot, ext = name.rpartition(".")
    if dot and base and 0 < len(ext) <= SecurityLimits.MAX_EXTENSION_LENGTH:
        head = _cut_to_bytes(base, limit - _encoded_length(ext) - 1).rstrip(PLACEHOLDER + ".")
        if head:
            return head + "." + ext
    return _cut_to_bytes(name, limit).strip(PLACEHOLDER + ".")


def validate_path(path: str, base_dir: Optional[str] = None) -> None:
    """Check that a path is well-formed and, if given, stays inside `base_dir`.

    Raises:
        SecurityError: EmptyInput, UnsafeCharacters (NUL byte), PathTooLong
            or PathTraversal
    """
    if not path:
        raise SecurityError("empty path", ErrorKind.EMPTY_INPUT)

    text = _as_text(path, path=repr(path))

    if "\x00" in text:
        raise SecurityError("path contains NUL byte", ErrorKind.UNSAFE_CHARACTERS)

    if len(text) > SecurityLimits.MAX_PATH_LENGTH:
        raise SecurityError(
            f"path too long ({len(text)} > {SecurityLimits.MAX_PATH_LENGTH})",
            ErrorKind.PATH_TOO_LONG,
        )

    cleaned = os.path.normpath(text)

    # A `..` can survive cleaning (leading `..`, or a backslash segment on POSIX)
    if ".." in SEGMENT_SEPARATORS.split(cleaned):
        raise SecurityError("path traversal attempt detected", ErrorKind.PATH_TRAVERSAL, path=text)

    if base_dir:
        abs_base = os.path.abspath(base_dir)
        candidate = cleaned if os.path.isabs(cleaned) else os.path.join(abs_base, cleaned)
        abs_candidate = os.path.abspath(candidate)

        try:
            relative = os.path.relpath(abs_candidate, abs_base)
        except ValueError as e:
            # Different drives on Windows
            raise SecurityError(
                "path escapes base directory", ErrorKind.PATH_TRAVERSAL, path=text
            ) from e

        if SEGMENT_SEPARATORS.split(relative)[0] == "..":
            raise SecurityError(
                "path escapes base directory", ErrorKind.PATH_TRAVERSAL, path=text
            )


def is_secure_path(full_path: str, base_dir: str) -> None:
    """Validate the path structure and its final name component.

    Raises:
        SecurityError: from `validate_path` or `sanitize_name`
    """
    validate_path(full_path, base_dir)

    filename = os.path.basename(full_path)
    try:
        sanitize_name(filename)
    except SecurityError as e:
        raise SecurityError(
            f"invalid filename in path: {e.message}", e.kind, path=full_path
        ) from e


def generate_random_name(
    prefix: str = "",
    extension: str = "",
    num_bytes: int = SecurityLimits.MIN_RANDOM_BYTES,
) -> SanitizedName:
    """Create an unpredictable file name.

    Format: `[prefix_]<hex>[.extension]`, with at least 8 random bytes drawn
    from the operating system's CSPRNG.

    Raises:
        SecurityError: if the prefix or extension cannot be sanitized
    """
    parts = []
    if prefix:
        try:
            parts.append(str(sanitize_name(prefix)))
        except SecurityError as e:
            raise SecurityError(f"invalid prefix: {e.message}", e.kind) from e

    parts.append(secrets.token_hex(max(num_bytes, SecurityLimits.MIN_RANDOM_BYTES)))
    filename = PLACEHOLDER.join(parts)

    if extension:
        try:
            clean_ext = sanitize_name(extension.lstrip("."))
        except SecurityError as e:
            raise SecurityError(f"invalid extension: {e.message}", e.kind) from e
        filename = f"{filename}.{clean_ext}"

    return sanitize_name(filename)
