from __future__ import annotations

import re

from ..schema import MAX_LANGUAGE_NAME_LENGTH

"""Sanitizers applied to parsed values right before they are written.

Queries are parameterized; the name check rejects SQL-looking input anyway so
that suspicious rows surface as import failures instead of stored text.
"""

__all__ = [
    "SanitizationError",
    "sanitize_language_name",
    "sanitize_iso_code",
    "sanitize_endonym",
]

_WHITESPACE = re.compile(r"\s+")
_SUSPICIOUS = re.compile(r"[';]|--|/\*|\*/|xp_| or | and ", re.IGNORECASE)
_ISO_CODE = re.compile(r"[a-z]{3}")


class SanitizationError(ValueError):
    pass


def _collapse(value: str) -> str:
    return _WHITESPACE.sub(" ", value.strip())


def sanitize_language_name(name: str) -> str:
    """Normalize a language name or raise SanitizationError."""
    if not name or not isinstance(name, str):
        raise SanitizationError("Language name must be a non-empty string")

    sanitized = _collapse(name)
    if not sanitized:
        raise SanitizationError("Language name cannot be empty")
    if _SUSPICIOUS.search(sanitized):
        raise SanitizationError("Language name contains invalid characters or patterns")
    if len(sanitized) > MAX_LANGUAGE_NAME_LENGTH:
        raise SanitizationError(
            f"Language name exceeds maximum length ({MAX_LANGUAGE_NAME_LENGTH} characters)"
        )
    return sanitized


def sanitize_iso_code(code: str | None) -> str | None:
    """Lowercased 3-letter code, or None when absent or malformed."""
    if not code or not isinstance(code, str):
        return None
    sanitized = code.strip().lower()
    return sanitized if _ISO_CODE.fullmatch(sanitized) else None


def sanitize_endonym(endonym: str | None) -> str | None:
    if not endonym or not isinstance(endonym, str):
        return None
    sanitized = _collapse(endonym)
    if not sanitized or len(sanitized) > MAX_LANGUAGE_NAME_LENGTH:
        return None
    return sanitized
