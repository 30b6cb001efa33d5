"""Storage-safe object keys from user-supplied filenames."""

import re
import time

MAX_FILENAME_LENGTH = 200

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_.]")
_DASH_VARIANTS = re.compile("[‐‑–—]")
_HYPHEN_RUNS = re.compile(r"-+")


def _trim(name: str) -> str:
    """Strip edge hyphens and leading periods until neither remains."""
    while True:
        trimmed = name.strip("-")
        if trimmed.startswith("."):
            trimmed = trimmed[1:]
        if trimmed == name:
            return name
        name = trimmed


def _truncate(name: str, max_length: int) -> str:
    if len(name) <= max_length:
        return name
    ext_index = name.rfind(".")
    if ext_index > 0 and len(name) - ext_index < max_length:
        ext = name[ext_index:]
        return name[: max_length - len(ext)] + ext
    return name[:max_length].rstrip("-")


def sanitize_filename(filename: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """Map an arbitrary filename to a key the storage backend accepts.

    The result contains only ASCII letters, digits, ``-``, ``_`` and ``.``,
    has no repeated or edge hyphens, never starts with a period and is at
    most ``max_length`` characters long. The extension survives truncation.
    Names that sanitize to nothing become ``file_<epoch millis>``.
    """
    sanitized = _UNSAFE_CHARS.sub("-", filename or "")
    sanitized = _DASH_VARIANTS.sub("-", sanitized)
    sanitized = _HYPHEN_RUNS.sub("-", sanitized)
    sanitized = _trim(sanitized)
    sanitized = _truncate(sanitized, max_length)

    if not sanitized:
        sanitized = f"file_{int(time.time() * 1000)}"
    return sanitized
